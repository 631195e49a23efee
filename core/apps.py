"""
Configuração do app core.

Localização: core/apps.py
"""
from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class CoreConfig(AppConfig):
    name = 'core'

    def ready(self):
        # A chave de assinatura dos tokens precisa ser injetada no startup
        if not getattr(settings, 'JWT_SECRET_KEY', ''):
            raise ImproperlyConfigured("JWT_SECRET_KEY não configurada")
