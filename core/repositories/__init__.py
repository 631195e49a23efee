"""
Repositories do core.

Localização: core/repositories/

Repositories são a camada de acesso a dados (Data Access Layer).
Eles encapsulam todas as operações com MongoDB, isolando a lógica de acesso
a dados do resto da aplicação.

Estrutura:
- Cada repository representa uma collection do MongoDB
- BaseRepository: CRUD genérico
- UserScopedRepository: CRUD sempre filtrado pelo dono (userId)
"""
from .base_repository import BaseRepository
from .user_scoped_repository import UserScopedRepository
from .user_repository import UserRepository
from .audit_log_repository import AuditLogRepository

__all__ = ['BaseRepository', 'UserScopedRepository', 'UserRepository', 'AuditLogRepository']
