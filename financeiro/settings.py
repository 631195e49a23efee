"""
Configurações do projeto Django.

Localização: financeiro/settings.py

Toda configuração sensível vem de variáveis de ambiente (carregadas de um
.env quando presente). Não há ORM: a persistência é feita no MongoDB via
core.database.
"""
import os
from pathlib import Path

from django.core.management.utils import get_random_secret_key
from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY') or get_random_secret_key()

DEBUG = os.getenv('DJANGO_DEBUG', 'false').lower() == 'true'

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'core.apps.CoreConfig',
    'finance.apps.FinanceConfig',
    'api',
]

# Ordem importa: autenticação -> isolamento por usuário -> captura de exceções
MIDDLEWARE = [
    'core.middleware.JWTAuthMiddleware',
    'core.middleware.SecurityMiddleware',
    'core.middleware.ExceptionLoggingMiddleware',
]

ROOT_URLCONF = 'financeiro.urls'

WSGI_APPLICATION = 'financeiro.wsgi.application'
ASGI_APPLICATION = 'financeiro.asgi.application'

DATABASES = {}

APPEND_SLASH = False

LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# MongoDB
MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'financeiro_db')
MONGO_TIMEOUT_MS = int(os.getenv('MONGO_TIMEOUT_MS', '5000'))

# Token de acesso (Bearer)
JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', '')
JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', '24'))

# Fuso usado para interpretar datas sem timezone vindas dos clientes
APP_TIMEZONE = os.getenv('APP_TIMEZONE', 'America/Sao_Paulo')

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'padrao': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'padrao',
        },
    },
    'loggers': {
        'core': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': True},
        'finance': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': True},
        'api': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': True},
    },
}
