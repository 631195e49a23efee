"""
Schemas de entrada do app finance.

Localização: finance/schemas.py

Cada entidade tem um formato canônico (o mesmo gravado no MongoDB). As
variantes de nome enviadas pelos clientes (valor/value, number/cardNumber,
estabelecimento/store...) são aceitas aqui e não passam daqui.

Valores em dinheiro chegam em reais e saem validados em centavos (int),
que é como são gravados.
"""
import math
from typing import Optional, Literal, Any, ClassVar, Annotated
from datetime import datetime
from pydantic import Field, AliasChoices, AfterValidator, BeforeValidator, field_validator, model_validator
from core.money import reais_para_centavos
from core.schemas import InputSchema, UpdateSchema, parse_datetime_value
from finance.models.compra_model import CompraModel


def _valor_positivo(value: Any) -> Any:
    # bool é subclasse de int: True não é um valor monetário
    if isinstance(value, bool):
        raise ValueError("valor deve ser numérico")
    if isinstance(value, (int, float)) and (math.isnan(value) or math.isinf(value)):
        raise ValueError("valor deve ser finito")
    return value


# Reais na entrada; depois da validação, centavos inteiros
Dinheiro = Annotated[float, BeforeValidator(_valor_positivo), AfterValidator(reais_para_centavos)]


def _texto(value: Any) -> Any:
    # Números de cartão e CVC chegam como int em alguns clientes
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _minusculo_sem_acento(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return value.replace('é', 'e')
    return value


# Categorias

class CategoriaInput(InputSchema):
    categoryName: str = Field(min_length=1, validation_alias=AliasChoices('categoryName', 'name', 'nome'))
    categoryColor: str = Field(min_length=1, validation_alias=AliasChoices('categoryColor', 'color', 'cor'))
    spendingLimit: Optional[Dinheiro] = Field(
        default=None, ge=0, validation_alias=AliasChoices('spendingLimit', 'limite')
    )


class CategoriaUpdate(UpdateSchema):
    IMMUTABLE_FIELDS: ClassVar[tuple] = ('_id', 'id', 'userId', 'revenueValue', 'categoryBalance')

    categoryName: Optional[str] = Field(default=None, min_length=1,
                                        validation_alias=AliasChoices('categoryName', 'name', 'nome'))
    categoryColor: Optional[str] = Field(default=None, min_length=1,
                                         validation_alias=AliasChoices('categoryColor', 'color', 'cor'))
    spendingLimit: Optional[Dinheiro] = Field(default=None, ge=0,
                                           validation_alias=AliasChoices('spendingLimit', 'limite'))


# Cartões

class CartaoInput(InputSchema):
    cardNumber: str = Field(min_length=4, validation_alias=AliasChoices('cardNumber', 'number', 'numero'))
    cardCVC: str = Field(min_length=3, max_length=4, validation_alias=AliasChoices('cardCVC', 'cvc'))
    cardDateValidity: str = Field(min_length=1, validation_alias=AliasChoices('cardDateValidity', 'validade'))
    cardName: str = Field(min_length=1, validation_alias=AliasChoices('cardName', 'nomeCartao'))
    cardDateClose: int = Field(ge=1, le=31, validation_alias=AliasChoices('cardDateClose', 'diaFechamento'))
    cardDateMaturity: int = Field(ge=1, le=31, validation_alias=AliasChoices('cardDateMaturity', 'diaVencimento'))
    cardBalance: Dinheiro = Field(default=0, ge=0, validation_alias=AliasChoices('cardBalance', 'saldo'))
    cardLimited: Dinheiro = Field(ge=0, validation_alias=AliasChoices('cardLimited', 'limite', 'limit'))
    cardType: Literal['credito', 'debito'] = Field(validation_alias=AliasChoices('cardType', 'tipo', 'type'))

    @field_validator('cardNumber', 'cardCVC', mode='before')
    @classmethod
    def _numero(cls, value):
        return _texto(value)

    @field_validator('cardType', mode='before')
    @classmethod
    def _tipo(cls, value):
        return _minusculo_sem_acento(value)


class CartaoUpdate(UpdateSchema):
    # O limite disponível só muda por compras (e seus estornos)
    IMMUTABLE_FIELDS: ClassVar[tuple] = ('_id', 'id', 'userId', 'cardLimited', 'limite', 'limit')

    cardNumber: Optional[str] = Field(default=None, min_length=4,
                                      validation_alias=AliasChoices('cardNumber', 'number', 'numero'))
    cardCVC: Optional[str] = Field(default=None, min_length=3, max_length=4,
                                   validation_alias=AliasChoices('cardCVC', 'cvc'))
    cardDateValidity: Optional[str] = Field(default=None,
                                            validation_alias=AliasChoices('cardDateValidity', 'validade'))
    cardName: Optional[str] = Field(default=None, min_length=1,
                                    validation_alias=AliasChoices('cardName', 'nomeCartao'))
    cardDateClose: Optional[int] = Field(default=None, ge=1, le=31,
                                         validation_alias=AliasChoices('cardDateClose', 'diaFechamento'))
    cardDateMaturity: Optional[int] = Field(default=None, ge=1, le=31,
                                            validation_alias=AliasChoices('cardDateMaturity', 'diaVencimento'))
    cardBalance: Optional[Dinheiro] = Field(default=None, ge=0,
                                         validation_alias=AliasChoices('cardBalance', 'saldo'))
    cardType: Optional[Literal['credito', 'debito']] = Field(default=None,
                                                             validation_alias=AliasChoices('cardType', 'tipo', 'type'))

    @field_validator('cardNumber', 'cardCVC', mode='before')
    @classmethod
    def _numero(cls, value):
        return _texto(value)

    @field_validator('cardType', mode='before')
    @classmethod
    def _tipo(cls, value):
        return _minusculo_sem_acento(value)


# Contas bancárias

class ContaInput(InputSchema):
    accountBankingName: str = Field(
        min_length=1,
        validation_alias=AliasChoices('accountBankingName', 'accountName', 'name', 'nome'),
    )
    accountBalance: Dinheiro = Field(default=0, ge=0,
                                  validation_alias=AliasChoices('accountBalance', 'balance', 'saldo'))


class ContaUpdate(UpdateSchema):
    # O saldo só muda por compras e receitas
    IMMUTABLE_FIELDS: ClassVar[tuple] = ('_id', 'id', 'userId', 'accountBalance', 'balance', 'saldo')

    accountBankingName: Optional[str] = Field(
        default=None, min_length=1,
        validation_alias=AliasChoices('accountBankingName', 'accountName', 'name', 'nome'),
    )


# Referências por nome ou id, comuns a compras e receitas

class _ComCategoria(InputSchema):
    categoryId: Optional[str] = None
    categoryName: Optional[str] = Field(default=None, validation_alias=AliasChoices('categoryName', 'categoria'))


class _ComConta(InputSchema):
    accountId: Optional[str] = None
    accountName: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('accountName', 'accountBankingName', 'accountNumber', 'conta'),
    )

    @property
    def tem_conta(self) -> bool:
        return bool(self.accountId or self.accountName)


def _data_opcional(value: Any) -> Any:
    return parse_datetime_value(value)


# Compras

class CompraInput(_ComCategoria, _ComConta):
    store: str = Field(min_length=1, validation_alias=AliasChoices('store', 'estabelecimento'))
    value: Dinheiro = Field(gt=0, validation_alias=AliasChoices('value', 'valor'))
    paymentMethod: Literal['credito', 'debito', 'pix'] = Field(
        validation_alias=AliasChoices('paymentMethod', 'metodoPagamento', 'formaPagamento')
    )
    cardId: Optional[str] = None
    cardNumber: Optional[str] = Field(default=None, validation_alias=AliasChoices('cardNumber', 'number'))
    date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices('date', 'data'))

    @field_validator('paymentMethod', mode='before')
    @classmethod
    def _metodo(cls, value):
        return _minusculo_sem_acento(value)

    @field_validator('cardNumber', mode='before')
    @classmethod
    def _numero(cls, value):
        return _texto(value)

    @field_validator('date', mode='before')
    @classmethod
    def _data(cls, value):
        return _data_opcional(value)

    @model_validator(mode='after')
    def _referencias(self):
        if not (self.categoryId or self.categoryName):
            raise ValueError("informe categoryName ou categoryId")
        if CompraModel.usa_cartao(self.paymentMethod):
            if not (self.cardId or self.cardNumber):
                raise ValueError("compra no crédito exige cardNumber ou cardId")
        elif not self.tem_conta:
            raise ValueError(f"compra no {self.paymentMethod} exige accountName ou accountId")
        return self

    @property
    def tem_cartao(self) -> bool:
        return bool(self.cardId or self.cardNumber)


class CompraUpdate(UpdateSchema):
    """Só dados descritivos: valor e origem do dinheiro não mudam após a compra."""

    IMMUTABLE_FIELDS: ClassVar[tuple] = (
        '_id', 'id', 'userId',
        'value', 'valor',
        'paymentMethod', 'metodoPagamento', 'formaPagamento',
        'cardId', 'cardNumber', 'number',
        'accountId', 'accountName', 'accountBankingName', 'accountNumber', 'conta',
    )

    store: Optional[str] = Field(default=None, min_length=1,
                                 validation_alias=AliasChoices('store', 'estabelecimento'))
    date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices('date', 'data'))
    categoryId: Optional[str] = None
    categoryName: Optional[str] = Field(default=None, validation_alias=AliasChoices('categoryName', 'categoria'))

    @field_validator('date', mode='before')
    @classmethod
    def _data(cls, value):
        return _data_opcional(value)


# Receitas

class ReceitaInput(_ComCategoria, _ComConta):
    expenseValue: Dinheiro = Field(gt=0, validation_alias=AliasChoices('expenseValue', 'value', 'valor'))
    expenseType: Literal['entrada', 'saida'] = Field(validation_alias=AliasChoices('expenseType', 'type', 'tipo'))
    expenseName: str = Field(min_length=1,
                             validation_alias=AliasChoices('expenseName', 'name', 'nome', 'descricao'))
    expenseEstablishment: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('expenseEstablishment', 'establishment', 'estabelecimento')
    )
    date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices('date', 'data'))

    @field_validator('expenseType', mode='before')
    @classmethod
    def _tipo(cls, value):
        if isinstance(value, str):
            return value.strip().lower().replace('í', 'i')
        return value

    @field_validator('date', mode='before')
    @classmethod
    def _data(cls, value):
        return _data_opcional(value)


class ReceitaUpdate(UpdateSchema):
    IMMUTABLE_FIELDS: ClassVar[tuple] = (
        '_id', 'id', 'userId', 'purchaseId', 'origin',
        'expenseValue', 'value', 'valor',
        'expenseType', 'type', 'tipo',
        'accountId', 'accountName', 'accountBankingName', 'accountNumber', 'conta',
    )

    expenseName: Optional[str] = Field(default=None, min_length=1,
                                       validation_alias=AliasChoices('expenseName', 'name', 'nome', 'descricao'))
    expenseEstablishment: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('expenseEstablishment', 'establishment', 'estabelecimento')
    )
    date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices('date', 'data'))
    categoryId: Optional[str] = None
    categoryName: Optional[str] = Field(default=None, validation_alias=AliasChoices('categoryName', 'categoria'))

    @field_validator('date', mode='before')
    @classmethod
    def _data(cls, value):
        return _data_opcional(value)
