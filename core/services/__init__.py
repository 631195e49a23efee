"""
Services do core.

Localização: core/services/

Services contêm a lógica de negócio relacionada a funcionalidades base,
como autenticação, usuários e auditoria.
"""
from .token_service import TokenService
from .auth_service import AuthService
from .user_service import UserService
from .audit_log_service import AuditLogService

__all__ = ['TokenService', 'AuthService', 'UserService', 'AuditLogService']
