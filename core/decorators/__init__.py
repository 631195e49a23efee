"""
Decorators do core.

Localização: core/decorators/

Decorators para as views da API e auditoria.
"""
from .api import api_view
from .audit_log import audit_log
