"""
Modelo de Categoria.

Localização: finance/models/categoria_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  userId: ObjectId,         # ID do usuário
  categoryName: String,     # Nome da categoria como digitado
  categoryNameLower: String,  # Nome normalizado; único por usuário
  categoryColor: String,    # Cor de exibição
  spendingLimit: Int,       # Teto de gastos em centavos (opcional)
  created_at: ISODate,
  updated_at: ISODate
}

revenueValue e categoryBalance NÃO são persistidos: são recalculados a
cada leitura a partir das receitas vinculadas (categoryId).
"""
from typing import Dict, Any, Optional
from datetime import datetime
from bson import ObjectId


class CategoriaModel:
    """
    Modelo de dados para categorias.
    """

    # Campos derivados, nunca aceitos na escrita
    CAMPOS_DERIVADOS = ('revenueValue', 'categoryBalance')

    @staticmethod
    def normalizar_nome(nome: str) -> str:
        """Chave de unicidade: ' Mercado ' e 'mercado' são a mesma categoria."""
        return nome.strip().lower()

    @staticmethod
    def create_categoria_data(user_id: str, categoryName: str, categoryColor: str,
                             spendingLimit: Optional[int] = None) -> Dict[str, Any]:
        """
        Cria estrutura de dados de categoria.

        Args:
            user_id: ID do usuário
            categoryName: Nome da categoria
            categoryColor: Cor de exibição
            spendingLimit: Teto de gastos em centavos (opcional)

        Returns:
            Dict com dados da categoria
        """
        data = {
            'userId': ObjectId(user_id) if isinstance(user_id, str) else user_id,
            'categoryName': categoryName.strip(),
            'categoryNameLower': CategoriaModel.normalizar_nome(categoryName),
            'categoryColor': categoryColor.strip(),
            'created_at': datetime.utcnow(),
            'updated_at': datetime.utcnow()
        }
        if spendingLimit is not None:
            data['spendingLimit'] = spendingLimit
        return data

    @staticmethod
    def with_totals(categoria: Dict[str, Any], entradas: int = 0,
                    saidas: int = 0) -> Dict[str, Any]:
        """
        Anexa os valores derivados à categoria lida do banco.

        revenueValue: soma de todas as receitas vinculadas (entradas + saídas)
        categoryBalance: entradas menos saídas

        Valores em centavos, como os das receitas.
        """
        return {
            **categoria,
            'revenueValue': entradas + saidas,
            'categoryBalance': entradas - saidas,
        }
