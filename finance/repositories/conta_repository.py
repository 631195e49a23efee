"""
Repository para contas bancárias no MongoDB.

Localização: finance/repositories/conta_repository.py
"""
from typing import Optional, Dict, Any
from core.repositories.user_scoped_repository import UserScopedRepository


class ContaRepository(UserScopedRepository):

    def __init__(self):
        super().__init__('contas')

    def _ensure_indexes(self):
        # Nome da conta é único por usuário (usado para resolver compras)
        self.collection.create_index([('userId', 1), ('accountBankingName', 1)], unique=True)

    def find_by_name(self, user_id: str, nome: str) -> Optional[Dict[str, Any]]:
        return self.find_one_for_user(user_id, {'accountBankingName': nome.strip()})
