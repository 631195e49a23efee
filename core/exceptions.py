"""
Erros de domínio da aplicação.

Localização: core/exceptions.py

Cada erro carrega o status HTTP e um código estável. As views não montam
respostas de erro manualmente: o decorator api_view traduz estas exceções
para JSON.
"""
from typing import Optional

from pymongo.errors import (
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)


class FinanceError(Exception):
    """Base de todos os erros de domínio."""

    status_code = 500
    code = 'erro_interno'
    title = 'Erro interno do servidor'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.title
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'error': self.title,
            'message': self.message,
            'code': self.code,
        }


class ValidationError(FinanceError, ValueError):
    """Entrada malformada ou ausente. Rejeitada antes de qualquer mutação."""

    status_code = 400
    code = 'validacao'
    title = 'Dados inválidos'


class InvalidAmountError(ValidationError):
    code = 'valor_invalido'
    title = 'Valor inválido'


class DuplicateError(ValidationError):
    code = 'duplicado'
    title = 'Registro duplicado'


class NotFoundError(FinanceError):
    """
    Entidade inexistente ou pertencente a outro usuário.

    Não diferencia os dois casos para não revelar dados de terceiros.
    """

    status_code = 404
    code = 'nao_encontrado'
    title = 'Não encontrado'

    def __init__(self, message: Optional[str] = None, key: Optional[str] = None):
        super().__init__(message)
        self.key = key

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.key:
            data['key'] = self.key
        return data


class InsufficientFundsError(FinanceError):
    """Saldo ou limite insuficiente: a atualização condicional não casou."""

    status_code = 400
    code = 'saldo_insuficiente'
    title = 'Saldo insuficiente'


class UnauthorizedError(FinanceError):
    status_code = 401
    code = 'nao_autenticado'
    title = 'Não autenticado'


class ForbiddenError(FinanceError):
    status_code = 403
    code = 'proibido'
    title = 'Acesso negado'


class InconsistentStateError(FinanceError):
    """
    O saldo foi alterado mas o registro dependente falhou.

    compensated=True: o estorno foi aplicado e a operação pode ser repetida.
    compensated=False: o estorno também falhou e o saldo ficou divergente.
    """

    status_code = 500
    code = 'inconsistencia'
    title = 'Falha ao registrar a operação'

    def __init__(self, message: Optional[str] = None, compensated: bool = False,
                 entity: Optional[str] = None, entity_id: Optional[str] = None):
        super().__init__(message)
        self.compensated = compensated
        self.entity = entity
        self.entity_id = entity_id

    @property
    def retryable(self) -> bool:
        return self.compensated

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['retryable'] = self.retryable
        return data


class StoreTimeoutError(FinanceError):
    code = 'timeout'
    title = 'Tempo limite excedido'


class StoreUnavailableError(FinanceError):
    code = 'banco_indisponivel'
    title = 'Erro interno do servidor'


_TIMEOUT_ERRORS = (ExecutionTimeout, NetworkTimeout, WTimeoutError, ServerSelectionTimeoutError)


def translate_store_error(error: PyMongoError) -> FinanceError:
    """Converte uma exceção do pymongo no erro de domínio equivalente."""
    if isinstance(error, _TIMEOUT_ERRORS):
        return StoreTimeoutError("O banco de dados não respondeu a tempo. Tente novamente.")
    return StoreUnavailableError("Não foi possível concluir a operação. Tente novamente.")
