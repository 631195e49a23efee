"""
Services do app finance.

Localização: finance/services/

Services contêm a lógica de negócio da aplicação.
Eles:
- Orquestram chamadas a repositories
- Aplicam regras de negócio
- Validam dados

NÃO devem acessar diretamente o MongoDB, apenas via repositories.
"""
from .lookup_service import LookupService
from .balance_service import BalanceService
from .transaction_service import TransactionService
from .compra_service import CompraService
from .receita_service import ReceitaService
from .categoria_service import CategoriaService
from .cartao_service import CartaoService
from .conta_service import ContaService

__all__ = [
    'LookupService',
    'BalanceService',
    'TransactionService',
    'CompraService',
    'ReceitaService',
    'CategoriaService',
    'CartaoService',
    'ContaService',
]
