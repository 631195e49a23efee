"""
Trilha de auditoria.

Localização: core/services/audit_log_service.py

Grava quem fez o quê em cada compra, receita e login, e as inconsistências
de saldo detectadas pelos fluxos do app finance. Uma falha ao gravar nunca
derruba a operação principal: vai para o logger e a chamada retorna None.
"""
import logging
from typing import Optional, Dict, Any, List
import traceback
from pymongo.errors import PyMongoError
from core.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 500


class AuditLogService:
    """
    Uso típico:

        AuditLogService().log_inconsistency(
            user_id, entity='compra', error=exc, compensated=False
        )
    """

    SEVERITY_INFO = 'info'
    SEVERITY_ERROR = 'error'
    SEVERITY_CRITICAL = 'critical'

    def __init__(self, audit_repo: Optional[AuditLogRepository] = None):
        self._audit_repo = audit_repo

    @property
    def audit_repo(self) -> AuditLogRepository:
        # Criado sob demanda para não abrir a collection em requests que não auditam
        if self._audit_repo is None:
            self._audit_repo = AuditLogRepository()
        return self._audit_repo

    def log_action(self, user_id: Optional[str], action: str, entity: str,
                   source: str = 'api', status: str = 'success',
                   entity_id: Optional[str] = None, payload: Optional[Dict[str, Any]] = None,
                   error: Optional[Any] = None,
                   severity: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Grava uma entrada na collection audit_logs.

        Args:
            user_id: dono da ação (None para eventos do sistema)
            action: 'login', 'create_compra', 'modify_receita', 'inconsistency'...
            entity: 'user', 'compra', 'receita' ou 'system'
            status: 'success' ou 'error'
            severity: se omitida, 'error' para status de erro e 'info' nos demais
            error: exceção ou texto; guardado truncado

        Returns:
            O documento gravado, ou None quando o MongoDB recusa a escrita.
        """
        entrada = {
            'user_id': user_id,
            'action': action,
            'entity': entity,
            'source': source,
            'status': status,
            'severity': severity or (self.SEVERITY_ERROR if status == 'error' else self.SEVERITY_INFO),
        }
        if entity_id:
            entrada['entity_id'] = str(entity_id)
        if payload:
            entrada['payload'] = payload
        if error:
            entrada['error'] = self._format_error(error)

        try:
            return self.audit_repo.create(entrada)
        except PyMongoError:
            logger.exception("Falha ao gravar audit log (%s/%s)", action, entity)
            return None

    def log_login(self, user_id: Optional[str], status: str = 'success',
                  error: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.log_action(user_id, 'login', 'user', entity_id=user_id,
                               status=status, error=error)

    def log_error(self, user_id: Optional[str], action: str, entity: str,
                  error: Any, source: str = 'api',
                  entity_id: Optional[str] = None,
                  payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Atalho para log_action com status 'error'."""
        return self.log_action(user_id, action, entity, source=source, status='error',
                               entity_id=entity_id, payload=payload, error=error)

    def log_inconsistency(self, user_id: Optional[str], entity: str,
                          error: Any, compensated: bool,
                          entity_id: Optional[str] = None,
                          payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Registra falha entre a mutação de saldo e a gravação do registro.

        Sem estorno aplicado a severidade é 'critical': o saldo persistido
        não corresponde mais aos lançamentos e precisa de correção manual.
        """
        return self.log_action(
            user_id, 'inconsistency', entity,
            status='error',
            entity_id=entity_id,
            payload={'compensated': compensated, **(payload or {})},
            error=error,
            severity=self.SEVERITY_ERROR if compensated else self.SEVERITY_CRITICAL
        )

    def get_user_logs(self, user_id: str, limit: int = 100,
                      skip: int = 0) -> List[Dict[str, Any]]:
        return self.audit_repo.find_by_user(user_id, limit, skip)

    def get_errors(self, user_id: Optional[str] = None, severity: Optional[str] = None,
                   limit: int = 100, skip: int = 0) -> List[Dict[str, Any]]:
        return self.audit_repo.find_errors(user_id, severity, limit, skip)

    def _format_error(self, error: Any) -> str:
        """Exceções viram o fim do traceback; tudo é cortado em MAX_ERROR_LENGTH."""
        if isinstance(error, BaseException):
            linhas = traceback.format_exception(type(error), error, error.__traceback__)
            texto = ''.join(linhas[-3:])
            if len(texto) > MAX_ERROR_LENGTH:
                return texto[:MAX_ERROR_LENGTH - 3] + '...'
            return texto
        return str(error)[:MAX_ERROR_LENGTH]
