"""
Repository base para collections que pertencem a um usuário.

Localização: core/repositories/user_scoped_repository.py

SEGURANÇA: todas as operações exigem user_id e o incluem no filtro.
Um documento de outro usuário é tratado exatamente como inexistente.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime
from bson import ObjectId
from pymongo import ReturnDocument
from core.repositories.base_repository import BaseRepository, as_object_id


class UserScopedRepository(BaseRepository):
    """
    Operações CRUD sempre filtradas pelo dono do documento (campo userId).

    Exemplo de uso:
        class ContaRepository(UserScopedRepository):
            def __init__(self):
                super().__init__('contas')
    """

    owner_field = 'userId'

    def _scope(self, user_id: Any, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Monta a query com o filtro de dono.

        Raises:
            ValueError: Se user_id não fornecido ou inválido
        """
        if not user_id:
            raise ValueError("user_id é obrigatório")
        owner = as_object_id(user_id)
        if owner is None:
            raise ValueError("user_id inválido")
        return {**(query or {}), self.owner_field: owner}

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Cria um documento.

        SEGURANÇA: Valida que userId está presente.
        """
        if self.owner_field not in data:
            raise ValueError(f"{self.owner_field} é obrigatório")
        data[self.owner_field] = self._scope(data[self.owner_field])[self.owner_field]
        return super().create(data)

    def find_by_user(self, user_id: str, query: Optional[Dict[str, Any]] = None,
                     limit: int = 500, skip: int = 0,
                     sort: tuple = None) -> List[Dict[str, Any]]:
        """Lista documentos do usuário, opcionalmente com filtros extras."""
        return self.find_many(self._scope(user_id, query), limit=limit, skip=skip, sort=sort)

    def find_by_id(self, document_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Busca documento por ID dentro do escopo do usuário.

        Args:
            document_id: ID do documento
            user_id: ID do dono (obrigatório)

        Returns:
            Documento ou None (inexistente ou de outro usuário)
        """
        oid = as_object_id(document_id)
        if oid is None:
            return None
        return self.collection.find_one(self._scope(user_id, {'_id': oid}))

    def find_one_for_user(self, user_id: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(self._scope(user_id, query))

    def update_for_user(self, document_id: str, user_id: str,
                        data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Atualiza campos de um documento do usuário; None se não encontrado."""
        oid = as_object_id(document_id)
        if oid is None:
            return None
        data = {k: v for k, v in data.items() if k not in ('_id', self.owner_field)}
        return self.update_one(self._scope(user_id, {'_id': oid}), data)

    def delete_for_user(self, document_id: str, user_id: str) -> bool:
        oid = as_object_id(document_id)
        if oid is None:
            return False
        result = self.collection.delete_one(self._scope(user_id, {'_id': oid}))
        return result.deleted_count > 0

    def increment_field(self, document_id: Any, user_id: Any, field: str,
                        delta: int, minimum: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Soma delta ao campo numérico em uma única operação atômica no banco.

        Com minimum, a atualização só acontece se o valor atual for >= minimum
        (a checagem e a escrita são a mesma operação, sem janela entre elas).

        Returns:
            Documento atualizado, ou None se nada casou (inexistente, de outro
            usuário ou com valor abaixo do mínimo)
        """
        oid = as_object_id(document_id)
        if oid is None:
            return None
        query = self._scope(user_id, {'_id': oid})
        if minimum is not None:
            query[field] = {'$gte': minimum}
        return self.collection.find_one_and_update(
            query,
            {
                '$inc': {field: delta},
                '$set': {'updated_at': datetime.utcnow()},
            },
            return_document=ReturnDocument.AFTER
        )

    def aggregate_for_user(self, user_id: str, pipeline: List[Dict[str, Any]],
                           match: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Executa um pipeline precedido de $match com o filtro de dono."""
        stages = [{'$match': self._scope(user_id, match)}] + list(pipeline)
        return list(self.collection.aggregate(stages))

    @staticmethod
    def owner_id(user_id: Any) -> Optional[ObjectId]:
        return as_object_id(user_id)
