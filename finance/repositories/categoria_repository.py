"""
Repository para categorias no MongoDB.

Localização: finance/repositories/categoria_repository.py
"""
from typing import Optional, List, Dict, Any
from core.repositories.user_scoped_repository import UserScopedRepository
from finance.models.categoria_model import CategoriaModel


class CategoriaRepository(UserScopedRepository):
    """
    Repository para gerenciar categorias no MongoDB.

    Os campos derivados (revenueValue, categoryBalance) não ficam aqui:
    são calculados a partir das receitas pelo ReceitaRepository.
    """

    def __init__(self):
        super().__init__('categorias')

    def _ensure_indexes(self):
        """
        Cria índices necessários.

        [userId, categoryNameLower] é único: o banco recusa a segunda
        categoria com o mesmo nome, mesmo em requisições simultâneas.
        """
        self.collection.create_index('userId')
        self.collection.create_index([('userId', 1), ('categoryNameLower', 1)], unique=True)

    def find_by_user(self, user_id: str, query: Optional[Dict[str, Any]] = None,
                     limit: int = 500, skip: int = 0,
                     sort: tuple = ('categoryName', 1)) -> List[Dict[str, Any]]:
        return super().find_by_user(user_id, query, limit=limit, skip=skip, sort=sort)

    def find_by_name(self, user_id: str, nome: str) -> Optional[Dict[str, Any]]:
        """Categoria do usuário pelo nome, sem diferenciar maiúsculas."""
        return self.find_one_for_user(
            user_id, {'categoryNameLower': CategoriaModel.normalizar_nome(nome)}
        )

    def update_for_user(self, document_id: str, user_id: str,
                        data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if 'categoryName' in data:
            data = {
                **data,
                'categoryName': data['categoryName'].strip(),
                'categoryNameLower': CategoriaModel.normalizar_nome(data['categoryName']),
            }
        return super().update_for_user(document_id, user_id, data)
