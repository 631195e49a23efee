"""
Middleware de autenticação por JWT.

Localização: core/middleware/jwt_auth_middleware.py

Valida o token Bearer das rotas /api/ antes das views e anexa o usuário
ao request. Sem token válido a resposta é 401.
"""
import logging
from django.http import JsonResponse
from pymongo.errors import PyMongoError
from core.services.auth_service import AuthService
from core.exceptions import UnauthorizedError, translate_store_error

logger = logging.getLogger(__name__)


class JWTAuthMiddleware:
    """
    Middleware de autenticação via token Bearer.

    Injeta o usuário autenticado no request como request.user_mongo.
    Toda rota sob /api/ exige token, exceto as listadas em EXEMPT_PATHS;
    a checagem acontece aqui, antes de qualquer view resolver entidades.
    """

    API_PREFIX = '/api/'

    # Rotas que não precisam de autenticação
    EXEMPT_PATHS = (
        '/api/usuarios/login',
        '/api/usuarios/registro',
        '/api/api-docs',
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.user_mongo = None

        path = request.path
        is_api_request = path.startswith(self.API_PREFIX)
        is_exempt = path.rstrip('/') in self.EXEMPT_PATHS

        token = self._extract_token(request)

        if token:
            try:
                request.user_mongo = AuthService().get_user_from_token(token)
            except UnauthorizedError as e:
                if is_api_request and not is_exempt:
                    return JsonResponse(e.to_dict(), status=e.status_code)
            except PyMongoError as e:
                logger.exception("Erro ao carregar usuário do token")
                erro = translate_store_error(e)
                return JsonResponse(erro.to_dict(), status=erro.status_code)
        elif is_api_request and not is_exempt:
            erro = UnauthorizedError("É necessário enviar o header Authorization: Bearer <token>")
            return JsonResponse(erro.to_dict(), status=erro.status_code)

        return self.get_response(request)

    @staticmethod
    def _extract_token(request):
        auth = request.META.get('HTTP_AUTHORIZATION', '')
        if not auth:
            return None
        scheme, _, token = auth.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            # Header presente mas fora do formato esperado conta como token inválido
            return auth
        return token.strip()
