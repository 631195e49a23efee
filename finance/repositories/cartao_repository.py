"""
Repository para cartões no MongoDB.

Localização: finance/repositories/cartao_repository.py
"""
from typing import Optional, Dict, Any
from core.repositories.user_scoped_repository import UserScopedRepository


class CartaoRepository(UserScopedRepository):
    """
    Repository para gerenciar cartões.

    Exemplo de uso:
        repo = CartaoRepository()
        cartao = repo.find_by_number(user_id, '5555444433332222')
    """

    def __init__(self):
        super().__init__('cartoes')

    def _ensure_indexes(self):
        # Número do cartão é único por usuário
        self.collection.create_index([('userId', 1), ('cardNumber', 1)], unique=True)

    def find_by_number(self, user_id: str, numero: str) -> Optional[Dict[str, Any]]:
        return self.find_one_for_user(user_id, {'cardNumber': str(numero).strip()})
