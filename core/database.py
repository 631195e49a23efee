"""
Conexão com o MongoDB.

Localização: core/database.py

Mantém um único MongoClient por processo. O pymongo já gerencia o pool de
conexões, então os repositories só precisam de get_database().
"""
import logging

from django.conf import settings
from pymongo import MongoClient

logger = logging.getLogger(__name__)

_client = None


def get_client() -> MongoClient:
    """Retorna o MongoClient do processo, criando-o na primeira chamada."""
    global _client
    if _client is None:
        timeout_ms = settings.MONGO_TIMEOUT_MS
        _client = MongoClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            retryWrites=True,
        )
        logger.info("MongoClient criado para o banco %s", settings.MONGO_DB_NAME)
    return _client


def set_client(client) -> None:
    """Substitui o cliente do processo (usado por testes e scripts)."""
    global _client
    _client = client


def get_database():
    """Retorna o banco configurado em MONGO_DB_NAME."""
    return get_client()[settings.MONGO_DB_NAME]
