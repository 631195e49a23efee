"""
Middleware de segurança para garantir isolamento de dados.

Localização: core/middleware/security_middleware.py

Este middleware garante que o user_id está sempre disponível no request.
As views nunca leem o id do dono do corpo, da query string ou de headers
customizados: ele vem apenas do token validado.
"""
from typing import Optional
from core.exceptions import UnauthorizedError


class SecurityMiddleware:
    """
    Middleware de segurança para controle multi-usuário.

    Garante:
    - user_id sempre disponível em request.user_id
    - role disponível em request.user_role
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Injeta user_id no request se usuário autenticado
        if getattr(request, 'user_mongo', None):
            request.user_id = str(request.user_mongo['_id'])
            request.user_role = request.user_mongo.get('role', 'user')
        else:
            request.user_id = None
            request.user_role = None

        response = self.get_response(request)
        return response


def get_user_id(request) -> Optional[str]:
    """
    Retorna user_id do request de forma segura.

    Args:
        request: Request object

    Returns:
        user_id como string ou None
    """
    user_id = getattr(request, 'user_id', None)
    if user_id:
        return user_id
    if getattr(request, 'user_mongo', None):
        return str(request.user_mongo['_id'])
    return None


def require_user_id(request) -> str:
    """
    Retorna user_id ou levanta exceção se não autenticado.

    Raises:
        UnauthorizedError: Se usuário não autenticado
    """
    user_id = get_user_id(request)
    if not user_id:
        raise UnauthorizedError("Usuário não autenticado")
    return user_id
