"""
Middlewares do core.

Localização: core/middleware/

Middlewares para autenticação, isolamento por usuário e captura de erros.
"""
from .exception_logging_middleware import ExceptionLoggingMiddleware
from .security_middleware import SecurityMiddleware
from .jwt_auth_middleware import JWTAuthMiddleware

__all__ = ['ExceptionLoggingMiddleware', 'SecurityMiddleware', 'JWTAuthMiddleware']
