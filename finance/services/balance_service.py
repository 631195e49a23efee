"""
Service de mutação de saldos.

Localização: finance/services/balance_service.py

Único ponto do sistema que altera cardLimited e accountBalance, sempre em
centavos inteiros (core/money.py). Débito é uma atualização condicional no
próprio MongoDB ("subtrai X onde saldo >= X"):
duas requisições concorrentes nunca passam as duas pela checagem de saldo.
"""
import logging
from typing import Dict, Any, Optional
from core.exceptions import InvalidAmountError, InsufficientFundsError, NotFoundError
from finance.models.cartao_model import CartaoModel
from finance.models.conta_model import ContaModel
from finance.repositories.cartao_repository import CartaoRepository
from finance.repositories.conta_repository import ContaRepository

logger = logging.getLogger(__name__)


class BalanceService:
    """
    Débitos e créditos atômicos em cartões e contas.

    Exemplo de uso:
        balance = BalanceService()
        conta = balance.debit(balance.CONTA, conta_id, user_id, 5000)  # R$ 50,00
    """

    CARTAO = 'cartao'
    CONTA = 'conta'

    def __init__(self, cartao_repo: Optional[CartaoRepository] = None,
                 conta_repo: Optional[ContaRepository] = None):
        self.cartao_repo = cartao_repo or CartaoRepository()
        self.conta_repo = conta_repo or ContaRepository()

    def _target(self, fonte: str):
        if fonte == self.CARTAO:
            return self.cartao_repo, CartaoModel.BALANCE_FIELD
        if fonte == self.CONTA:
            return self.conta_repo, ContaModel.BALANCE_FIELD
        raise ValueError(f"Fonte de saldo desconhecida: {fonte}")

    @staticmethod
    def validate_amount(amount: Any) -> int:
        """
        Garante valor inteiro e positivo de centavos.

        Raises:
            InvalidAmountError: zero, negativo, fracionário ou não inteiro
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError("O valor deve ser um inteiro de centavos")
        if amount <= 0:
            raise InvalidAmountError("O valor deve ser positivo")
        return amount

    def debit(self, fonte: str, entity_id: Any, user_id: Any, amount: Any) -> Dict[str, Any]:
        """
        Subtrai amount do saldo se (e somente se) o saldo for suficiente.

        Returns:
            Documento atualizado

        Raises:
            InvalidAmountError: valor inválido (nenhuma escrita)
            NotFoundError: entidade inexistente ou de outro usuário
            InsufficientFundsError: saldo menor que o valor (nada é alterado)
        """
        amount = self.validate_amount(amount)
        repo, field = self._target(fonte)

        updated = repo.increment_field(entity_id, user_id, field, -amount, minimum=amount)
        if updated is not None:
            logger.info("Débito de %d centavos em %s %s (%s=%d)", amount, fonte, entity_id,
                        field, updated[field])
            return updated

        # A atualização não casou: distingue inexistente de saldo insuficiente
        if repo.find_by_id(entity_id, user_id) is None:
            raise NotFoundError(f"{fonte.capitalize()} não encontrado(a).",
                                key='cardId' if fonte == self.CARTAO else 'accountId')
        logger.info("Saldo insuficiente em %s %s para débito de %d centavos", fonte, entity_id, amount)
        raise InsufficientFundsError(
            "Limite insuficiente no cartão." if fonte == self.CARTAO
            else "Saldo insuficiente na conta."
        )

    def credit(self, fonte: str, entity_id: Any, user_id: Any, amount: Any) -> Dict[str, Any]:
        """
        Soma amount ao saldo, sem teto.

        Raises:
            InvalidAmountError: valor inválido
            NotFoundError: entidade inexistente ou de outro usuário
        """
        amount = self.validate_amount(amount)
        repo, field = self._target(fonte)

        updated = repo.increment_field(entity_id, user_id, field, amount)
        if updated is None:
            raise NotFoundError(f"{fonte.capitalize()} não encontrado(a).",
                                key='cardId' if fonte == self.CARTAO else 'accountId')
        logger.info("Crédito de %d centavos em %s %s (%s=%d)", amount, fonte, entity_id,
                    field, updated[field])
        return updated

    def apply_delta(self, fonte: str, entity_id: Any, user_id: Any, delta: int) -> Dict[str, Any]:
        """Delta positivo credita; negativo debita (com checagem de saldo)."""
        if isinstance(delta, int) and not isinstance(delta, bool) and delta < 0:
            return self.debit(fonte, entity_id, user_id, -delta)
        return self.credit(fonte, entity_id, user_id, delta)
