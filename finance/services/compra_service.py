"""
Service para compras.

Localização: finance/services/compra_service.py

Fluxo de criação:
    received -> resolving -> funds_checked/balance_updated -> record_persisted
    -> mirror_persisted -> completed

Falhas em resolving (NotFound) ou na checagem de saldo (InsufficientFunds)
rejeitam a compra sem escrever nada. Falha depois do débito dispara o
estorno e termina em InconsistentStateError.
"""
import logging
from typing import List, Dict, Any, Optional, Tuple
from core.exceptions import NotFoundError
from core.services.audit_log_service import AuditLogService
from finance.models.compra_model import CompraModel
from finance.repositories.compra_repository import CompraRepository
from finance.schemas import CompraInput, CompraUpdate
from finance.services.balance_service import BalanceService
from finance.services.lookup_service import LookupService
from finance.services.saga import compensate, inconsistent
from finance.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)


class CompraService:
    """
    Service para gerenciar compras.

    Exemplo de uso:
        service = CompraService()
        compra = service.create_compra(user_id, CompraInput.model_validate(payload))
    """

    def __init__(self, compra_repo: Optional[CompraRepository] = None,
                 lookup: Optional[LookupService] = None,
                 balance: Optional[BalanceService] = None,
                 recorder: Optional[TransactionService] = None,
                 audit_service: Optional[AuditLogService] = None):
        self.compra_repo = compra_repo or CompraRepository()
        self.lookup = lookup or LookupService()
        self.balance = balance or BalanceService()
        self.recorder = recorder or TransactionService(compra_repo=self.compra_repo)
        self.audit_service = audit_service or AuditLogService()

    def _estado(self, estado: str, user_id: str, **extra):
        logger.info("compra[%s] %s %s", user_id, estado,
                    ' '.join(f"{k}={v}" for k, v in extra.items()))

    @staticmethod
    def _fonte(compra: Dict[str, Any]) -> Tuple[str, Any]:
        """Fonte do dinheiro: (tipo, id) do cartão ou da conta."""
        if CompraModel.usa_cartao(compra['paymentMethod']):
            return BalanceService.CARTAO, compra.get('cardId')
        return BalanceService.CONTA, compra.get('accountId')

    def create_compra(self, user_id: str, dados: CompraInput) -> Dict[str, Any]:
        """
        Registra uma compra debitando o cartão (crédito) ou a conta (débito/pix).

        Args:
            user_id: ID do usuário autenticado
            dados: Entrada já validada

        Returns:
            Compra criada

        Raises:
            NotFoundError: cartão, categoria ou conta não encontrados para o usuário
            InsufficientFundsError: limite/saldo menor que o valor
            InconsistentStateError: falha após o débito
        """
        self._estado(CompraModel.RECEBIDA, user_id, valor=dados.value, metodo=dados.paymentMethod)

        self._estado(CompraModel.RESOLVENDO, user_id)
        try:
            categoria = self.lookup.resolve_categoria(user_id, dados.categoryName, dados.categoryId)
            cartao = None
            if dados.tem_cartao:
                cartao = self.lookup.resolve_cartao(user_id, dados.cardNumber, dados.cardId)
            conta = None
            if dados.tem_conta:
                conta = self.lookup.resolve_conta(user_id, dados.accountName, dados.accountId)
        except NotFoundError as e:
            self._estado(CompraModel.REJEITADA, user_id, motivo=e.key)
            raise

        compra_data = CompraModel.create_compra_data(
            user_id=user_id,
            store=dados.store,
            value=dados.value,
            payment_method=dados.paymentMethod,
            categoria=categoria,
            cartao=cartao,
            conta=conta,
            date=dados.date
        )
        fonte, fonte_id = self._fonte(compra_data)

        try:
            self.balance.debit(fonte, fonte_id, user_id, dados.value)
        except Exception as e:
            self._estado(CompraModel.REJEITADA, user_id, motivo=type(e).__name__)
            raise
        self._estado(CompraModel.SALDO_ATUALIZADO, user_id, fonte=fonte, fonte_id=fonte_id)

        compra = None
        try:
            compra = self.recorder.record_compra(compra_data)
            self._estado(CompraModel.REGISTRO_GRAVADO, user_id, compra_id=compra['_id'])
            self.recorder.record_espelho(compra)
            self._estado(CompraModel.ESPELHO_GRAVADO, user_id, compra_id=compra['_id'])
        except Exception as e:
            self._estado(CompraModel.INCONSISTENTE, user_id, erro=type(e).__name__)
            steps = [lambda: self.balance.credit(fonte, fonte_id, user_id, dados.value)]
            if compra is not None:
                steps.append(lambda: self.recorder.discard_compra(user_id, compra))
            compensated = compensate(steps, f"compra de {dados.value} centavos ({fonte} {fonte_id})")
            raise inconsistent(
                e, compensated, user_id, 'compra',
                entity_id=str(compra['_id']) if compra is not None else None,
                payload={'fonte': fonte, 'fonte_id': str(fonte_id), 'centavos': dados.value},
                audit_service=self.audit_service
            ) from e

        self._estado(CompraModel.CONCLUIDA, user_id, compra_id=compra['_id'])
        return compra

    def list_compras(self, user_id: str, limit: int = 500, skip: int = 0) -> List[Dict[str, Any]]:
        return self.compra_repo.find_by_user(user_id, limit=limit, skip=skip)

    def get_compra(self, user_id: str, compra_id: str) -> Dict[str, Any]:
        compra = self.compra_repo.find_by_id(compra_id, user_id)
        if not compra:
            raise NotFoundError("Compra não encontrada", key='id')
        return compra

    def update_compra(self, user_id: str, compra_id: str, dados: CompraUpdate) -> Dict[str, Any]:
        """
        Atualiza estabelecimento, data ou categoria. O espelho acompanha.

        Valor e forma de pagamento não mudam aqui: para isso, exclua a
        compra (o saldo é estornado) e registre outra.
        """
        compra = self.get_compra(user_id, compra_id)

        changes = dados.to_document()
        categoria_id = changes.pop('categoryId', None)
        categoria_nome = changes.pop('categoryName', None)
        if categoria_id or categoria_nome:
            categoria = self.lookup.resolve_categoria(user_id, categoria_nome, categoria_id)
            changes['categoryId'] = categoria['_id']

        if not changes:
            return compra

        atualizada = self.compra_repo.update_for_user(compra['_id'], user_id, changes)
        if not atualizada:
            raise NotFoundError("Compra não encontrada", key='id')
        self.recorder.sync_espelho(user_id, atualizada)
        return atualizada

    def delete_compra(self, user_id: str, compra_id: str) -> Dict[str, Any]:
        """
        Exclui a compra estornando o valor na fonte (cartão ou conta).

        O estorno vem antes da exclusão; se a exclusão falhar, o valor é
        debitado de novo.

        Returns:
            Compra excluída
        """
        compra = self.get_compra(user_id, compra_id)
        fonte, fonte_id = self._fonte(compra)

        estornado = False
        if fonte_id is not None:
            try:
                self.balance.credit(fonte, fonte_id, user_id, compra['value'])
                estornado = True
            except NotFoundError:
                # Cartão/conta já excluídos: não há saldo a restaurar
                logger.warning("Compra %s: %s %s não existe mais, exclusão sem estorno",
                               compra['_id'], fonte, fonte_id)

        try:
            self.recorder.discard_compra(user_id, compra)
        except Exception as e:
            steps = []
            if estornado:
                steps.append(lambda: self.balance.debit(fonte, fonte_id, user_id, compra['value']))
            compensated = compensate(steps, f"exclusão da compra {compra['_id']}")
            raise inconsistent(
                e, compensated, user_id, 'compra',
                entity_id=str(compra['_id']),
                payload={'operacao': 'delete', 'fonte': fonte, 'fonte_id': str(fonte_id),
                         'centavos': compra['value']},
                audit_service=self.audit_service
            ) from e

        logger.info("Compra %s excluída (estorno=%s)", compra['_id'], estornado)
        return compra
