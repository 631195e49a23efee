"""
Decorator para auditoria e logging.

Localização: core/decorators/audit_log.py

Decorator para logar ações automaticamente.
"""
from functools import wraps
from typing import Callable
from core.services.audit_log_service import AuditLogService
import traceback

SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS')


def audit_log(action: str, entity: str, source: str = 'api', id_kwarg: str = None):
    """
    Decorator para logar ações automaticamente.

    Deve envolver o api_view, para registrar também as respostas de erro.

    Args:
        action: Tipo de ação ('create_compra', 'modify_receita', etc.)
        entity: Entidade relacionada ('compra', 'receita', etc.)
        source: Origem ('api')
        id_kwarg: Nome do argumento da URL com o id da entidade (opcional)

    Exemplo de uso:
        @audit_log(action='modify_compra', entity='compra', id_kwarg='compra_id')
        @api_view(['DELETE'])
        def compra_delete_view(request, compra_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            # Leituras não são auditadas
            if request.method in SAFE_METHODS:
                return func(request, *args, **kwargs)

            audit_service = AuditLogService()
            entity_id = kwargs.get(id_kwarg) if id_kwarg else None
            payload = {'method': request.method, 'path': request.path}

            try:
                response = func(request, *args, **kwargs)
            except Exception:
                # Log de erro e re-raise: quem responde é o middleware
                audit_service.log_error(
                    user_id=getattr(request, 'user_id', None),
                    action=action,
                    entity=entity,
                    error=traceback.format_exc(),
                    source=source,
                    entity_id=entity_id,
                    payload=payload
                )
                raise

            payload['status_code'] = response.status_code
            audit_service.log_action(
                user_id=getattr(request, 'user_id', None),
                action=action,
                entity=entity,
                entity_id=entity_id,
                source=source,
                status='success' if response.status_code < 400 else 'error',
                payload=payload
            )
            return response

        return wrapper
    return decorator
