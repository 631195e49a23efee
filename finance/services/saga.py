"""
Estorno de operações que alteram saldo.

Localização: finance/services/saga.py

Uma compra (ou receita com conta) altera o saldo e depois grava registros.
Não há transação entre essas escritas: se uma gravação falha, os passos de
estorno são executados aqui e o resultado vira InconsistentStateError.
"""
import logging
from typing import Callable, Iterable, Optional, Dict, Any
from core.exceptions import InconsistentStateError
from core.services.audit_log_service import AuditLogService

logger = logging.getLogger(__name__)


def compensate(steps: Iterable[Callable[[], Any]], descricao: str) -> bool:
    """
    Executa os passos de estorno em ordem.

    Para no primeiro passo que falhar: os seguintes dependem dele.

    Returns:
        True se todos os passos foram aplicados
    """
    for step in steps:
        try:
            step()
        except Exception:
            logger.critical("Falha no estorno de %s", descricao, exc_info=True)
            return False
    return True


def inconsistent(error: Exception, compensated: bool, user_id: str, entity: str,
                 entity_id: Optional[str] = None,
                 payload: Optional[Dict[str, Any]] = None,
                 audit_service: Optional[AuditLogService] = None) -> InconsistentStateError:
    """
    Registra a falha (log + audit) e monta o erro a ser levantado.

    Sem estorno o saldo gravado diverge dos lançamentos: severidade crítica.
    """
    if compensated:
        logger.error("Operação em %s falhou após alterar saldo; estorno aplicado: %s",
                     entity, error)
        message = "Não foi possível registrar a operação. O saldo foi restaurado; tente novamente."
    else:
        logger.critical("Operação em %s falhou após alterar saldo e o estorno falhou "
                        "(entity_id=%s, payload=%s): %s", entity, entity_id, payload, error)
        message = "Não foi possível registrar a operação e o saldo não pôde ser restaurado."

    (audit_service or AuditLogService()).log_inconsistency(
        user_id=user_id,
        entity=entity,
        error=error,
        compensated=compensated,
        entity_id=entity_id,
        payload=payload
    )
    return InconsistentStateError(message, compensated=compensated,
                                  entity=entity, entity_id=entity_id)
