"""
Valores monetários em centavos.

Localização: core/money.py

No MongoDB todo valor em dinheiro é um inteiro de centavos: $inc e $gte
sobre inteiros são exatos. A API continua falando em reais; a conversão
acontece na entrada (finance/schemas.py) e na saída (core/serializers.py).
"""
from decimal import Decimal, InvalidOperation
from typing import Any

CENTAVOS_POR_REAL = 100

# Campos gravados (ou calculados) em centavos
CAMPOS_MONETARIOS = frozenset({
    'value',
    'expenseValue',
    'accountBalance',
    'cardBalance',
    'cardLimited',
    'spendingLimit',
    'revenueValue',
    'categoryBalance',
    'entradas',
    'saidas',
})


def reais_para_centavos(valor: Any) -> int:
    """
    Converte reais (int, float, Decimal ou str) em centavos.

    Floats passam por str() para que 0.1 vire exatamente 10 centavos.

    Raises:
        ValueError: valor não numérico ou com frações de centavo
    """
    if isinstance(valor, bool):
        raise ValueError("valor deve ser numérico")
    try:
        decimal = Decimal(str(valor))
    except InvalidOperation:
        raise ValueError("valor deve ser numérico")
    if not decimal.is_finite():
        raise ValueError("valor deve ser finito")
    centavos = decimal * CENTAVOS_POR_REAL
    if centavos != centavos.to_integral_value():
        raise ValueError("valor aceita no máximo duas casas decimais")
    return int(centavos)


def centavos_para_reais(centavos: Any) -> Any:
    if isinstance(centavos, int) and not isinstance(centavos, bool):
        return centavos / CENTAVOS_POR_REAL
    return centavos
