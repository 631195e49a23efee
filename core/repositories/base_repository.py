"""
Acesso genérico às collections do MongoDB.

Localização: core/repositories/base_repository.py

Os repositories do projeto herdam daqui. Consultas por dono (userId) ficam
em UserScopedRepository; esta classe não conhece o conceito de usuário.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime
from core.database import get_database
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument


def as_object_id(value: Any) -> Optional[ObjectId]:
    """Converte para ObjectId; retorna None se o valor não for um id válido."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class BaseRepository:
    """
    CRUD sobre uma collection, com created_at/updated_at automáticos.

    Subclasses informam o nome da collection e, se precisarem, sobrescrevem
    _ensure_indexes:

        class ContaRepository(UserScopedRepository):
            def __init__(self):
                super().__init__('contas')
    """

    def __init__(self, collection_name: str):
        self.db = get_database()
        self.collection = self.db[collection_name]
        self._ensure_indexes()

    def _ensure_indexes(self):
        """Chamado na construção; a base não cria índices."""

    def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Documento pelo _id (string ou ObjectId). Id malformado retorna None."""
        oid = as_object_id(document_id)
        if oid is None:
            return None
        return self.collection.find_one({'_id': oid})

    def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(query)

    def find_many(self, query: Dict[str, Any] = None,
                  limit: int = 100, skip: int = 0,
                  sort: tuple = None) -> List[Dict[str, Any]]:
        """
        Lista paginada.

        Args:
            query: filtro (vazio retorna a collection inteira)
            limit: máximo de documentos
            skip: documentos a ignorar no início
            sort: (campo, direção), ex. ('date', -1)
        """
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(*sort)
        return list(cursor.skip(skip).limit(limit))

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insere e devolve o próprio dict, agora com _id e timestamps."""
        agora = datetime.utcnow()
        data.setdefault('created_at', agora)
        data.setdefault('updated_at', agora)
        data['_id'] = self.collection.insert_one(data).inserted_id
        return data

    def update(self, document_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = as_object_id(document_id)
        if oid is None:
            return None
        return self.update_one({'_id': oid}, data)

    def update_one(self, query: Dict[str, Any], data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Aplica $set no documento que casar com a query e o retorna atualizado."""
        return self.collection.find_one_and_update(
            query,
            {'$set': {**data, 'updated_at': datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def delete(self, document_id: str) -> bool:
        """True se algum documento foi removido."""
        oid = as_object_id(document_id)
        if oid is None:
            return False
        return self.collection.delete_one({'_id': oid}).deleted_count > 0

    def count(self, query: Dict[str, Any] = None) -> int:
        return self.collection.count_documents(query or {})
