"""
Schemas de entrada (camada de validação na borda HTTP).

Localização: core/schemas.py

Os clientes enviam nomes de campos diferentes para a mesma informação
(ex.: birthdayDate / dateBirthday). Cada schema aceita as variantes via
AliasChoices e expõe um único formato canônico para os services.
"""
from typing import Optional, Any, Literal, ClassVar
from datetime import datetime, timezone
import pytz
from dateutil import parser as date_parser
from django.conf import settings
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator


def parse_datetime_value(value: Any) -> Any:
    """
    Converte datas vindas do cliente em datetime UTC sem tzinfo.

    Strings são lidas com dateutil; datas sem fuso são interpretadas no
    APP_TIMEZONE. O MongoDB guarda datetimes em UTC.
    """
    if value is None or value == '':
        return None
    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value)
        except ValueError:
            try:
                value = date_parser.parse(value, dayfirst=True)
            except (ValueError, OverflowError):
                raise ValueError("data inválida")
    if not isinstance(value, datetime):
        raise ValueError("data inválida")
    if value.tzinfo is None:
        value = pytz.timezone(settings.APP_TIMEZONE).localize(value)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class InputSchema(BaseModel):
    """Base dos schemas de entrada: ignora campos desconhecidos e remove espaços."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra='ignore')

    def to_document(self) -> dict:
        """Campos informados, já no nome canônico."""
        return self.model_dump(exclude_none=True)


class UpdateSchema(InputSchema):
    """Base dos schemas de atualização: campo desconhecido é erro."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra='forbid')

    # Campos que não podem ser alterados por atualização
    IMMUTABLE_FIELDS: ClassVar[tuple] = ()

    @model_validator(mode='before')
    @classmethod
    def _rejeita_imutaveis(cls, data: Any) -> Any:
        if isinstance(data, dict) and cls.IMMUTABLE_FIELDS:
            bloqueados = sorted(k for k in data if k in cls.IMMUTABLE_FIELDS)
            if bloqueados:
                raise ValueError(
                    "Campos não podem ser alterados: " + ', '.join(bloqueados)
                )
        return data

    def to_document(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class _DadosPessoais(InputSchema):
    age: Optional[int] = Field(default=None, ge=0, le=150, validation_alias=AliasChoices('age', 'idade'))
    birthdayDate: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices('birthdayDate', 'dateBirthday', 'birthDate', 'dataNascimento'),
    )
    gender: Optional[Literal['M', 'F']] = Field(default=None, validation_alias=AliasChoices('gender', 'genero'))

    @field_validator('birthdayDate', mode='before')
    @classmethod
    def _data(cls, value):
        return parse_datetime_value(value)

    @field_validator('gender', mode='before')
    @classmethod
    def _genero(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


def _valida_email(value: str) -> str:
    value = value.strip().lower()
    local, _, dominio = value.partition('@')
    if not local or '.' not in dominio or ' ' in value:
        raise ValueError("email inválido")
    return value


class RegistroInput(_DadosPessoais):
    email: str
    password: str = Field(min_length=6, validation_alias=AliasChoices('password', 'senha'))
    confirmPassword: str = Field(validation_alias=AliasChoices('confirmPassword', 'confirmarSenha'))
    name: str = Field(min_length=1, validation_alias=AliasChoices('name', 'nome'))

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        return _valida_email(value)

    @model_validator(mode='after')
    def _senhas_conferem(self):
        if self.password != self.confirmPassword:
            raise ValueError("As senhas não conferem")
        return self


class LoginInput(InputSchema):
    email: str
    password: str = Field(validation_alias=AliasChoices('password', 'senha'))

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        return value.strip().lower()


class UsuarioCreateInput(_DadosPessoais):
    """Criação administrativa de usuário (POST /api/usuarios)."""

    email: str
    password: str = Field(min_length=6, validation_alias=AliasChoices('password', 'senha'))
    name: str = Field(min_length=1, validation_alias=AliasChoices('name', 'nome'))
    role: Literal['user', 'admin'] = 'user'

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        return _valida_email(value)


class UsuarioUpdateInput(UpdateSchema):
    IMMUTABLE_FIELDS: ClassVar[tuple] = ('_id', 'id', 'role', 'password_hash')

    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6,
                                    validation_alias=AliasChoices('password', 'senha'))
    name: Optional[str] = Field(default=None, min_length=1, validation_alias=AliasChoices('name', 'nome'))
    age: Optional[int] = Field(default=None, ge=0, le=150, validation_alias=AliasChoices('age', 'idade'))
    birthdayDate: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices('birthdayDate', 'dateBirthday', 'birthDate', 'dataNascimento'),
    )
    gender: Optional[Literal['M', 'F']] = Field(default=None, validation_alias=AliasChoices('gender', 'genero'))

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        return _valida_email(value) if value is not None else value

    @field_validator('birthdayDate', mode='before')
    @classmethod
    def _data(cls, value):
        return parse_datetime_value(value)

    @field_validator('gender', mode='before')
    @classmethod
    def _genero(cls, value):
        return value.strip().upper() if isinstance(value, str) else value
