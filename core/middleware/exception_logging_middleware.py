"""
Middleware para capturar e logar exceções não tratadas.

Localização: core/middleware/exception_logging_middleware.py

Este middleware captura exceções que escaparam das views, registra o
detalhe completo no log do servidor e no audit_log, e devolve ao cliente
apenas uma mensagem genérica.
"""
import logging
import traceback
from django.http import JsonResponse
from pymongo.errors import PyMongoError
from core.services.audit_log_service import AuditLogService
from core.exceptions import FinanceError, translate_store_error

logger = logging.getLogger(__name__)


class ExceptionLoggingMiddleware:
    """
    Middleware para capturar exceções não tratadas e logá-las.

    Deve ser adicionado após outros middlewares para capturar exceções.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        return response

    def process_exception(self, request, exception):
        """
        Processa exceções não tratadas.

        Args:
            request: Request object
            exception: Exception capturada

        Returns:
            JsonResponse com erro genérico (sem detalhes internos)
        """
        if isinstance(exception, FinanceError):
            erro = exception
        elif isinstance(exception, PyMongoError):
            erro = translate_store_error(exception)
        else:
            erro = FinanceError("Erro interno do servidor")

        user_id = getattr(request, 'user_id', None)

        logger.error(
            "Exceção não tratada em %s %s: %s",
            request.method, request.path, exception,
            exc_info=(type(exception), exception, exception.__traceback__)
        )

        # Formata stacktrace
        error_trace = traceback.format_exception(
            type(exception),
            exception,
            exception.__traceback__
        )
        error_str = ''.join(error_trace[-5:])  # Últimas 5 linhas
        if len(error_str) > 1000:
            error_str = error_str[:997] + '...'

        AuditLogService().log_error(
            user_id=user_id,
            action='unhandled_exception',
            entity='system',
            error=error_str,
            payload={
                'path': request.path,
                'method': request.method,
                'exception_type': type(exception).__name__,
            }
        )

        return JsonResponse(erro.to_dict(), status=erro.status_code)
