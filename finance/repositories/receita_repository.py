"""
Repository para receitas (entradas e saídas) no MongoDB.

Localização: finance/repositories/receita_repository.py

Schema da collection: ver finance/models/receita_model.py
"""
from typing import Optional, List, Dict, Any
from core.repositories.user_scoped_repository import UserScopedRepository
from core.repositories.base_repository import as_object_id
from finance.models.receita_model import ReceitaModel


class ReceitaRepository(UserScopedRepository):
    """
    Repository para gerenciar receitas no MongoDB.

    Exemplo de uso:
        repo = ReceitaRepository()
        receitas = repo.find_by_tipo(user_id, 'entrada')
    """

    def __init__(self):
        super().__init__('receitas')

    def _ensure_indexes(self):
        """
        Cria índices necessários para otimizar queries.

        Índices:
        - [userId, date] (desc): Ordenação e filtros por período
        - [userId, expenseType]: Filtro por direção
        - [userId, categoryId]: Totais por categoria
        - purchaseId: Espelho de uma compra
        """
        self.collection.create_index([('userId', 1), ('date', -1)])
        self.collection.create_index([('userId', 1), ('expenseType', 1)])
        self.collection.create_index([('userId', 1), ('categoryId', 1)])
        self.collection.create_index('purchaseId', sparse=True)

    def find_by_user(self, user_id: str, query: Optional[Dict[str, Any]] = None,
                     limit: int = 500, skip: int = 0,
                     sort: tuple = ('date', -1)) -> List[Dict[str, Any]]:
        return super().find_by_user(user_id, query, limit=limit, skip=skip, sort=sort)

    def find_by_tipo(self, user_id: str, tipo: str, limit: int = 500,
                     skip: int = 0) -> List[Dict[str, Any]]:
        return self.find_by_user(user_id, {'expenseType': tipo}, limit=limit, skip=skip)

    def find_by_categoria(self, user_id: str, categoria_id: Any) -> List[Dict[str, Any]]:
        return self.find_by_user(user_id, {'categoryId': as_object_id(categoria_id)})

    def find_by_purchase(self, user_id: str, compra_id: Any) -> Optional[Dict[str, Any]]:
        return self.find_one_for_user(user_id, {'purchaseId': as_object_id(compra_id)})

    def update_by_purchase(self, user_id: str, compra_id: Any,
                           data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.update_one(
            self._scope(user_id, {'purchaseId': as_object_id(compra_id)}),
            data
        )

    def delete_by_purchase(self, user_id: str, compra_id: Any) -> int:
        result = self.collection.delete_many(
            self._scope(user_id, {'purchaseId': as_object_id(compra_id)})
        )
        return result.deleted_count

    def totals_by_categoria(self, user_id: str,
                            categoria_ids: Optional[List[Any]] = None) -> Dict[Any, Dict[str, int]]:
        """
        Soma entradas e saídas por categoria.

        SEGURANÇA: O $match inclui o userId.

        Args:
            user_id: ID do usuário
            categoria_ids: Restringe às categorias informadas (opcional)

        Returns:
            Dict {categoryId: {'entrada': centavos, 'saida': centavos}}
        """
        match = {'categoryId': {'$ne': None}}
        if categoria_ids is not None:
            match['categoryId'] = {'$in': [as_object_id(c) for c in categoria_ids]}

        pipeline = [
            {
                '$group': {
                    '_id': {'categoryId': '$categoryId', 'tipo': '$expenseType'},
                    'total': {'$sum': '$expenseValue'}
                }
            }
        ]

        totais: Dict[Any, Dict[str, int]] = {}
        for r in self.aggregate_for_user(user_id, pipeline, match):
            categoria_id = r['_id']['categoryId']
            por_tipo = totais.setdefault(categoria_id, {ReceitaModel.ENTRADA: 0, ReceitaModel.SAIDA: 0})
            por_tipo[r['_id']['tipo']] = por_tipo.get(r['_id']['tipo'], 0) + r['total']
        return totais
