"""
Service para contas bancárias.

Localização: finance/services/conta_service.py
"""
from typing import List, Dict, Any, Optional
from pymongo.errors import DuplicateKeyError
from core.exceptions import DuplicateError, NotFoundError
from finance.repositories.conta_repository import ContaRepository
from finance.schemas import ContaInput, ContaUpdate


class ContaService:
    """
    CRUD de contas bancárias do usuário.

    O saldo inicial vem na criação; depois disso só muda por compras e
    receitas (BalanceService).
    """

    def __init__(self, conta_repo: Optional[ContaRepository] = None):
        self.conta_repo = conta_repo or ContaRepository()

    def create_conta(self, user_id: str, dados: ContaInput) -> Dict[str, Any]:
        if self.conta_repo.find_by_name(user_id, dados.accountBankingName):
            raise DuplicateError("Já existe uma conta com esse nome")
        try:
            return self.conta_repo.create({'userId': user_id, **dados.to_document()})
        except DuplicateKeyError:
            raise DuplicateError("Já existe uma conta com esse nome")

    def list_contas(self, user_id: str) -> List[Dict[str, Any]]:
        return self.conta_repo.find_by_user(user_id, sort=('accountBankingName', 1))

    def get_conta(self, user_id: str, conta_id: str) -> Dict[str, Any]:
        conta = self.conta_repo.find_by_id(conta_id, user_id)
        if not conta:
            raise NotFoundError("Conta não encontrada", key='id')
        return conta

    def update_conta(self, user_id: str, conta_id: str, dados: ContaUpdate) -> Dict[str, Any]:
        conta = self.get_conta(user_id, conta_id)
        changes = dados.to_document()
        if not changes:
            return conta

        nome = changes.get('accountBankingName')
        if nome and nome != conta['accountBankingName'] and self.conta_repo.find_by_name(user_id, nome):
            raise DuplicateError("Já existe uma conta com esse nome")
        try:
            return self.conta_repo.update_for_user(conta['_id'], user_id, changes)
        except DuplicateKeyError:
            raise DuplicateError("Já existe uma conta com esse nome")

    def delete_conta(self, user_id: str, conta_id: str) -> bool:
        if not self.conta_repo.delete_for_user(conta_id, user_id):
            raise NotFoundError("Conta não encontrada", key='id')
        return True
