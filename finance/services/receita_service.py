"""
Service para receitas (entradas e saídas).

Localização: finance/services/receita_service.py

Receita com conta altera o saldo: 'entrada' credita, 'saida' debita (com
checagem de saldo). Sem conta, é só um lançamento. Receitas espelho de
compras são somente leitura: são mantidas pelo CompraService.
"""
import logging
from typing import List, Dict, Any, Optional
from core.exceptions import NotFoundError, ValidationError
from core.repositories.base_repository import as_object_id
from core.services.audit_log_service import AuditLogService
from finance.models.receita_model import ReceitaModel
from finance.repositories.receita_repository import ReceitaRepository
from finance.schemas import ReceitaInput, ReceitaUpdate
from finance.services.balance_service import BalanceService
from finance.services.lookup_service import LookupService
from finance.services.saga import compensate, inconsistent
from finance.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)


class ReceitaService:
    """
    Service para gerenciar receitas.

    Exemplo de uso:
        service = ReceitaService()
        receita = service.create_receita(user_id, ReceitaInput.model_validate(payload))
    """

    def __init__(self, receita_repo: Optional[ReceitaRepository] = None,
                 lookup: Optional[LookupService] = None,
                 balance: Optional[BalanceService] = None,
                 recorder: Optional[TransactionService] = None,
                 audit_service: Optional[AuditLogService] = None):
        self.receita_repo = receita_repo or ReceitaRepository()
        self.lookup = lookup or LookupService()
        self.balance = balance or BalanceService()
        self.recorder = recorder or TransactionService(receita_repo=self.receita_repo)
        self.audit_service = audit_service or AuditLogService()

    def create_receita(self, user_id: str, dados: ReceitaInput) -> Dict[str, Any]:
        """
        Registra uma receita e aplica o efeito no saldo da conta (se houver).

        Raises:
            NotFoundError: categoria ou conta não encontradas para o usuário
            InsufficientFundsError: 'saida' maior que o saldo da conta
            InconsistentStateError: falha ao gravar após alterar o saldo
        """
        categoria = None
        if dados.categoryId or dados.categoryName:
            categoria = self.lookup.resolve_categoria(user_id, dados.categoryName, dados.categoryId)
        conta = None
        if dados.tem_conta:
            conta = self.lookup.resolve_conta(user_id, dados.accountName, dados.accountId)

        receita_data = ReceitaModel.create_receita_data(
            user_id=user_id,
            expenseValue=dados.expenseValue,
            expenseType=dados.expenseType,
            expenseName=dados.expenseName,
            date=dados.date,
            expenseEstablishment=dados.expenseEstablishment,
            accountId=conta['_id'] if conta else None,
            categoryId=categoria['_id'] if categoria else None
        )

        if conta is None:
            return self.recorder.record_receita(receita_data)

        delta = ReceitaModel.delta(dados.expenseType, dados.expenseValue)
        self.balance.apply_delta(BalanceService.CONTA, conta['_id'], user_id, delta)

        try:
            return self.recorder.record_receita(receita_data)
        except Exception as e:
            compensated = compensate(
                [lambda: self.balance.apply_delta(BalanceService.CONTA, conta['_id'], user_id, -delta)],
                f"receita de {delta:+d} centavos na conta {conta['_id']}"
            )
            raise inconsistent(
                e, compensated, user_id, 'receita',
                payload={'conta_id': str(conta['_id']), 'delta': delta},
                audit_service=self.audit_service
            ) from e

    def list_receitas(self, user_id: str, limit: int = 500, skip: int = 0) -> List[Dict[str, Any]]:
        return self.receita_repo.find_by_user(user_id, limit=limit, skip=skip)

    def list_por_tipo(self, user_id: str, tipo: str) -> List[Dict[str, Any]]:
        if tipo not in ReceitaModel.TIPOS:
            raise ValidationError("Tipo deve ser 'entrada' ou 'saida'")
        return self.receita_repo.find_by_tipo(user_id, tipo)

    def get_receita(self, user_id: str, receita_id: str) -> Dict[str, Any]:
        receita = self.receita_repo.find_by_id(receita_id, user_id)
        if not receita:
            raise NotFoundError("Receita não encontrada", key='id')
        return receita

    def resumo_categoria(self, user_id: str, categoria_id: str) -> Dict[str, Any]:
        """
        Totais das receitas vinculadas a uma categoria do usuário.

        Returns:
            Dict com categoryId, entradas, saidas, revenueValue,
            categoryBalance (em centavos) e a lista de receitas
        """
        self.lookup.resolve_categoria(user_id, categoria_id=categoria_id)

        receitas = self.receita_repo.find_by_categoria(user_id, categoria_id)
        totais = self.receita_repo.totals_by_categoria(user_id, [categoria_id]).get(
            as_object_id(categoria_id), {}
        )
        entradas = totais.get(ReceitaModel.ENTRADA, 0)
        saidas = totais.get(ReceitaModel.SAIDA, 0)
        return {
            'categoryId': categoria_id,
            'entradas': entradas,
            'saidas': saidas,
            'revenueValue': entradas + saidas,
            'categoryBalance': entradas - saidas,
            'receitas': receitas,
        }

    def update_receita(self, user_id: str, receita_id: str, dados: ReceitaUpdate) -> Dict[str, Any]:
        """
        Atualiza nome, estabelecimento, data ou categoria.

        Raises:
            ValidationError: receita espelho de compra
        """
        receita = self.get_receita(user_id, receita_id)
        if ReceitaModel.is_espelho(receita):
            raise ValidationError("Receita gerada por compra: altere a compra correspondente")

        changes = dados.to_document()
        categoria_id = changes.pop('categoryId', None)
        categoria_nome = changes.pop('categoryName', None)
        if categoria_id or categoria_nome:
            categoria = self.lookup.resolve_categoria(user_id, categoria_nome, categoria_id)
            changes['categoryId'] = categoria['_id']

        if not changes:
            return receita

        atualizada = self.receita_repo.update_for_user(receita['_id'], user_id, changes)
        if not atualizada:
            raise NotFoundError("Receita não encontrada", key='id')
        return atualizada

    def delete_receita(self, user_id: str, receita_id: str) -> Dict[str, Any]:
        """
        Exclui a receita desfazendo o efeito no saldo da conta.

        Desfazer uma 'entrada' é um débito e pode falhar com saldo
        insuficiente; nesse caso nada é excluído.

        Raises:
            ValidationError: receita espelho de compra
        """
        receita = self.get_receita(user_id, receita_id)
        if ReceitaModel.is_espelho(receita):
            raise ValidationError("Receita gerada por compra: exclua a compra correspondente")

        conta_id = receita.get('accountId')
        delta = ReceitaModel.delta(receita['expenseType'], receita['expenseValue'])

        revertido = False
        if conta_id is not None:
            try:
                self.balance.apply_delta(BalanceService.CONTA, conta_id, user_id, -delta)
                revertido = True
            except NotFoundError:
                logger.warning("Receita %s: conta %s não existe mais, exclusão sem estorno",
                               receita['_id'], conta_id)

        try:
            self.recorder.discard_receita(user_id, receita)
        except Exception as e:
            steps = []
            if revertido:
                steps.append(lambda: self.balance.apply_delta(BalanceService.CONTA, conta_id, user_id, delta))
            compensated = compensate(steps, f"exclusão da receita {receita['_id']}")
            raise inconsistent(
                e, compensated, user_id, 'receita',
                entity_id=str(receita['_id']),
                payload={'operacao': 'delete', 'conta_id': str(conta_id), 'delta': delta},
                audit_service=self.audit_service
            ) from e

        return receita
