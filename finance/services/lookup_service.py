"""
Service de resolução de referências.

Localização: finance/services/lookup_service.py

Traduz o que o usuário digita (número do cartão, nome da categoria, nome da
conta) ou um id em documento do próprio usuário. Sem efeitos colaterais.
"""
from typing import Dict, Any, Optional
from core.exceptions import NotFoundError
from core.repositories.base_repository import as_object_id
from finance.repositories.cartao_repository import CartaoRepository
from finance.repositories.categoria_repository import CategoriaRepository
from finance.repositories.conta_repository import ContaRepository


class LookupService:
    """
    Resolve cartões, categorias e contas sempre no escopo do usuário.

    Entidade de outro usuário é tratada como inexistente.

    Exemplo de uso:
        lookup = LookupService()
        cartao = lookup.resolve_cartao(user_id, numero='5555444433332222')
    """

    def __init__(self, cartao_repo: Optional[CartaoRepository] = None,
                 categoria_repo: Optional[CategoriaRepository] = None,
                 conta_repo: Optional[ContaRepository] = None):
        self.cartao_repo = cartao_repo or CartaoRepository()
        self.categoria_repo = categoria_repo or CategoriaRepository()
        self.conta_repo = conta_repo or ContaRepository()

    def _by_id(self, repo, user_id: str, entity_id: str, key: str, label: str) -> Dict[str, Any]:
        doc = repo.find_by_id(entity_id, user_id) if as_object_id(entity_id) else None
        if not doc:
            raise NotFoundError(f"{label} não encontrado(a) com o id fornecido.", key=key)
        return doc

    def resolve_cartao(self, user_id: str, numero: Optional[str] = None,
                       cartao_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Busca o cartão pelo id ou pelo número.

        Raises:
            NotFoundError: key='cardId' ou 'cardNumber'
        """
        if cartao_id:
            return self._by_id(self.cartao_repo, user_id, cartao_id, 'cardId', 'Cartão')
        cartao = self.cartao_repo.find_by_number(user_id, numero) if numero else None
        if not cartao:
            raise NotFoundError("Cartão não encontrado com o número fornecido.", key='cardNumber')
        return cartao

    def resolve_categoria(self, user_id: str, nome: Optional[str] = None,
                          categoria_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Busca a categoria pelo id ou pelo nome (sem diferenciar maiúsculas).

        Raises:
            NotFoundError: key='categoryId' ou 'categoryName'
        """
        if categoria_id:
            return self._by_id(self.categoria_repo, user_id, categoria_id, 'categoryId', 'Categoria')
        categoria = self.categoria_repo.find_by_name(user_id, nome) if nome else None
        if not categoria:
            raise NotFoundError("Categoria não encontrada com o nome fornecido.", key='categoryName')
        return categoria

    def resolve_conta(self, user_id: str, nome: Optional[str] = None,
                      conta_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Busca a conta bancária pelo id ou pelo nome.

        Raises:
            NotFoundError: key='accountId' ou 'accountName'
        """
        if conta_id:
            return self._by_id(self.conta_repo, user_id, conta_id, 'accountId', 'Conta')
        conta = self.conta_repo.find_by_name(user_id, nome) if nome else None
        if not conta:
            raise NotFoundError("Conta não encontrada com o nome fornecido.", key='accountName')
        return conta
