"""
Repositories do app finance.

Localização: finance/repositories/

Repositories específicos para o domínio financeiro.
Cada repository representa uma collection relacionada a finanças e
filtra sempre pelo usuário dono (UserScopedRepository).
"""
from .categoria_repository import CategoriaRepository
from .cartao_repository import CartaoRepository
from .conta_repository import ContaRepository
from .compra_repository import CompraRepository
from .receita_repository import ReceitaRepository

__all__ = [
    'CategoriaRepository',
    'CartaoRepository',
    'ContaRepository',
    'CompraRepository',
    'ReceitaRepository',
]
