"""
Conversão entre documentos do MongoDB e JSON.

Localização: core/serializers.py
"""
import json
from datetime import datetime
from typing import Any, Dict, List

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from core.money import CAMPOS_MONETARIOS, centavos_para_reais

# Campos que nunca saem na resposta (senha e chaves internas)
_CAMPOS_PRIVADOS = {'password_hash', 'password', 'categoryNameLower'}


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Converte um documento em dict serializável.

    _id vira 'id', ObjectIds viram string, campos de senha são removidos
    e valores monetários saem de centavos para reais.
    """
    if doc is None:
        return None
    data = {}
    for key, value in doc.items():
        if key in _CAMPOS_PRIVADOS:
            continue
        if key == '_id':
            data['id'] = serialize_value(value)
            continue
        if key in CAMPOS_MONETARIOS:
            data[key] = centavos_para_reais(value)
            continue
        data[key] = serialize_value(value)
    return data


def serialize_many(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in docs]


def parse_json_body(request) -> Dict[str, Any]:
    """
    Lê o corpo JSON da requisição.

    Raises:
        ValidationError: Se o corpo não for um objeto JSON válido
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Corpo da requisição não é um JSON válido")
    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return data


def format_validation_error(error: PydanticValidationError) -> str:
    """Resume os erros do pydantic em uma única mensagem legível."""
    partes = []
    for err in error.errors():
        campo = '.'.join(str(p) for p in err.get('loc', ()) if p != '__root__')
        msg = err.get('msg', 'inválido')
        # pydantic prefixa mensagens de ValueError com "Value error, "
        if msg.startswith('Value error, '):
            msg = msg[len('Value error, '):]
        partes.append(f"{campo}: {msg}" if campo else msg)
    return '; '.join(partes) or 'Dados inválidos'


def to_object_id(value: Any, field: str = 'id') -> ObjectId:
    """
    Converte string em ObjectId.

    Raises:
        ValidationError: Se o valor não for um ObjectId válido
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValidationError(f"{field} inválido")
