"""
Decorator para views JSON da API.

Localização: core/decorators/api.py

Centraliza a tradução de erros em respostas HTTP, para que as views só
orquestrem: validar entrada -> chamar service -> serializar saída.
"""
import logging
from functools import wraps
from typing import Callable, Iterable
from django.http import JsonResponse
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError
from core.exceptions import FinanceError, ValidationError, translate_store_error
from core.serializers import format_validation_error

logger = logging.getLogger(__name__)


def api_view(methods: Iterable[str]):
    """
    Restringe os métodos HTTP e converte exceções de domínio em JSON.

    - FinanceError -> status do próprio erro
    - pydantic.ValidationError -> 400
    - PyMongoError -> 500 (timeout com código próprio)
    - Demais exceções sobem para o ExceptionLoggingMiddleware

    Exemplo de uso:
        @api_view(['GET', 'POST'])
        def compras_view(request):
            ...
    """
    allowed = [m.upper() for m in methods]

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                response = JsonResponse({
                    'error': 'Método não permitido',
                    'message': f"Use {', '.join(allowed)}",
                    'code': 'metodo_nao_permitido',
                }, status=405)
                response['Allow'] = ', '.join(allowed)
                return response

            try:
                return func(request, *args, **kwargs)
            except PydanticValidationError as e:
                erro = ValidationError(format_validation_error(e))
            except FinanceError as e:
                erro = e
            except PyMongoError as e:
                logger.exception("Erro do MongoDB em %s %s", request.method, request.path)
                erro = translate_store_error(e)

            if erro.status_code >= 500:
                logger.error("%s %s -> %s (%s)", request.method, request.path,
                             erro.status_code, erro.code)
            return JsonResponse(erro.to_dict(), status=erro.status_code,
                                json_dumps_params={'ensure_ascii': False})
        return wrapper
    return decorator
