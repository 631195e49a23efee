"""
Modelos do app finance.

Localização: finance/models/

Descrevem o formato dos documentos de cada collection e constantes de
domínio. Não acessam o banco.
"""
from .categoria_model import CategoriaModel
from .cartao_model import CartaoModel
from .conta_model import ContaModel
from .compra_model import CompraModel
from .receita_model import ReceitaModel

__all__ = ['CategoriaModel', 'CartaoModel', 'ContaModel', 'CompraModel', 'ReceitaModel']
