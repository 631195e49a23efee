"""
Service que grava os registros de uma movimentação.

Localização: finance/services/transaction_service.py

Grava compras, receitas e o espelho 'saida' de cada compra. Não mexe em
saldos: quem chama já aplicou (ou vai aplicar) a mutação pelo BalanceService.
"""
import logging
from typing import Dict, Any, Optional
from finance.models.receita_model import ReceitaModel
from finance.repositories.compra_repository import CompraRepository
from finance.repositories.receita_repository import ReceitaRepository

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Gravação dos registros de compras e receitas.

    Exemplo de uso:
        recorder = TransactionService()
        compra = recorder.record_compra(compra_data)
        espelho = recorder.record_espelho(compra)
    """

    def __init__(self, compra_repo: Optional[CompraRepository] = None,
                 receita_repo: Optional[ReceitaRepository] = None):
        self.compra_repo = compra_repo or CompraRepository()
        self.receita_repo = receita_repo or ReceitaRepository()

    def record_compra(self, compra_data: Dict[str, Any]) -> Dict[str, Any]:
        compra = self.compra_repo.create(compra_data)
        logger.debug("Compra %s gravada", compra['_id'])
        return compra

    def record_espelho(self, compra: Dict[str, Any]) -> Dict[str, Any]:
        """Grava a receita 'saida' que representa a compra."""
        espelho = self.receita_repo.create(ReceitaModel.create_espelho_data(compra))
        logger.debug("Espelho %s gravado para a compra %s", espelho['_id'], compra['_id'])
        return espelho

    def record_receita(self, receita_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.receita_repo.create(receita_data)

    def sync_espelho(self, user_id: str, compra: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Repete no espelho os campos descritivos da compra atualizada.

        Returns:
            Espelho atualizado ou None se a compra não tem espelho
        """
        espelho = ReceitaModel.create_espelho_data(compra)
        campos = {k: espelho[k] for k in ('expenseName', 'expenseEstablishment', 'date', 'categoryId')}
        return self.receita_repo.update_by_purchase(user_id, compra['_id'], campos)

    def discard_compra(self, user_id: str, compra: Dict[str, Any]) -> None:
        """Remove a compra e o espelho (primeiro o espelho)."""
        self.receita_repo.delete_by_purchase(user_id, compra['_id'])
        self.compra_repo.delete_for_user(compra['_id'], user_id)

    def discard_receita(self, user_id: str, receita: Dict[str, Any]) -> None:
        self.receita_repo.delete_for_user(receita['_id'], user_id)
