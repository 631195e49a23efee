"""
Configuração compartilhada dos testes.

Cada teste roda contra um MongoDB em memória (mongomock) novo.
"""
import os

import django
import mongomock
import pytest

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'financeiro.settings')
os.environ.setdefault('JWT_SECRET_KEY', 'chave-de-teste')
os.environ.setdefault('MONGO_DB_NAME', 'financeiro_test')

django.setup()

from core import database  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_client():
    client = mongomock.MongoClient()
    database.set_client(client)
    yield client
    database.set_client(None)
