"""
Repository para compras no MongoDB.

Localização: finance/repositories/compra_repository.py

Gravação e leitura apenas. Saldos são alterados pelo BalanceService.
"""
from typing import Optional, List, Dict, Any
from core.repositories.user_scoped_repository import UserScopedRepository


class CompraRepository(UserScopedRepository):
    """
    Repository para gerenciar compras no MongoDB.

    Exemplo de uso:
        repo = CompraRepository()
        compras = repo.find_by_user(user_id)
    """

    def __init__(self):
        super().__init__('compras')

    def _ensure_indexes(self):
        """
        Índices:
        - [userId, date] (desc): Listagem mais recentes primeiro
        - [userId, cardId]: Compras de um cartão
        - [userId, accountId]: Compras de uma conta
        """
        self.collection.create_index([('userId', 1), ('date', -1)])
        self.collection.create_index([('userId', 1), ('cardId', 1)])
        self.collection.create_index([('userId', 1), ('accountId', 1)])

    def find_by_user(self, user_id: str, query: Optional[Dict[str, Any]] = None,
                     limit: int = 500, skip: int = 0,
                     sort: tuple = ('date', -1)) -> List[Dict[str, Any]]:
        return super().find_by_user(user_id, query, limit=limit, skip=skip, sort=sort)
