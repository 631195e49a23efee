"""
Service para cartões.

Localização: finance/services/cartao_service.py
"""
from typing import List, Dict, Any, Optional
from pymongo.errors import DuplicateKeyError
from core.exceptions import DuplicateError, NotFoundError
from finance.repositories.cartao_repository import CartaoRepository
from finance.schemas import CartaoInput, CartaoUpdate


class CartaoService:
    """
    CRUD de cartões do usuário.

    O limite disponível (cardLimited) é definido na criação; depois disso só
    o BalanceService o altera.
    """

    def __init__(self, cartao_repo: Optional[CartaoRepository] = None):
        self.cartao_repo = cartao_repo or CartaoRepository()

    def create_cartao(self, user_id: str, dados: CartaoInput) -> Dict[str, Any]:
        """
        Raises:
            DuplicateError: Se o usuário já tem cartão com esse número
        """
        if self.cartao_repo.find_by_number(user_id, dados.cardNumber):
            raise DuplicateError("Já existe um cartão com esse número")
        try:
            return self.cartao_repo.create({'userId': user_id, **dados.to_document()})
        except DuplicateKeyError:
            raise DuplicateError("Já existe um cartão com esse número")

    def list_cartoes(self, user_id: str) -> List[Dict[str, Any]]:
        return self.cartao_repo.find_by_user(user_id, sort=('cardName', 1))

    def get_cartao(self, user_id: str, cartao_id: str) -> Dict[str, Any]:
        cartao = self.cartao_repo.find_by_id(cartao_id, user_id)
        if not cartao:
            raise NotFoundError("Cartão não encontrado", key='id')
        return cartao

    def update_cartao(self, user_id: str, cartao_id: str, dados: CartaoUpdate) -> Dict[str, Any]:
        cartao = self.get_cartao(user_id, cartao_id)
        changes = dados.to_document()
        if not changes:
            return cartao

        numero = changes.get('cardNumber')
        if numero and numero != cartao['cardNumber'] and self.cartao_repo.find_by_number(user_id, numero):
            raise DuplicateError("Já existe um cartão com esse número")
        try:
            return self.cartao_repo.update_for_user(cartao['_id'], user_id, changes)
        except DuplicateKeyError:
            raise DuplicateError("Já existe um cartão com esse número")

    def delete_cartao(self, user_id: str, cartao_id: str) -> bool:
        if not self.cartao_repo.delete_for_user(cartao_id, user_id):
            raise NotFoundError("Cartão não encontrado", key='id')
        return True
