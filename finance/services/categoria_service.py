"""
Service para gerenciar categorias.

Localização: finance/services/categoria_service.py

Toda categoria devolvida carrega revenueValue e categoryBalance calculados
na hora a partir das receitas vinculadas.
"""
from typing import List, Dict, Any, Optional
from pymongo.errors import DuplicateKeyError
from core.exceptions import DuplicateError, NotFoundError
from finance.models.categoria_model import CategoriaModel
from finance.models.receita_model import ReceitaModel
from finance.repositories.categoria_repository import CategoriaRepository
from finance.repositories.receita_repository import ReceitaRepository
from finance.schemas import CategoriaInput, CategoriaUpdate


class CategoriaService:
    """
    Service para gerenciar categorias.
    """

    def __init__(self, categoria_repo: Optional[CategoriaRepository] = None,
                 receita_repo: Optional[ReceitaRepository] = None):
        self.categoria_repo = categoria_repo or CategoriaRepository()
        self.receita_repo = receita_repo or ReceitaRepository()

    def _check_nome_livre(self, user_id: str, nome: str, ignorar_id=None):
        existente = self.categoria_repo.find_by_name(user_id, nome)
        if existente and existente['_id'] != ignorar_id:
            raise DuplicateError(f"Categoria '{nome}' já existe")

    def _with_totals(self, user_id: str, categorias: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not categorias:
            return []
        totais = self.receita_repo.totals_by_categoria(user_id, [c['_id'] for c in categorias])
        result = []
        for cat in categorias:
            por_tipo = totais.get(cat['_id'], {})
            result.append(CategoriaModel.with_totals(
                cat,
                entradas=por_tipo.get(ReceitaModel.ENTRADA, 0),
                saidas=por_tipo.get(ReceitaModel.SAIDA, 0)
            ))
        return result

    def create_categoria(self, user_id: str, dados: CategoriaInput) -> Dict[str, Any]:
        """
        Cria uma nova categoria.

        Raises:
            DuplicateError: Se já existe categoria com o mesmo nome para o usuário
        """
        self._check_nome_livre(user_id, dados.categoryName)

        categoria_data = CategoriaModel.create_categoria_data(
            user_id=user_id,
            categoryName=dados.categoryName,
            categoryColor=dados.categoryColor,
            spendingLimit=dados.spendingLimit
        )
        try:
            categoria = self.categoria_repo.create(categoria_data)
        except DuplicateKeyError:
            raise DuplicateError(f"Categoria '{dados.categoryName}' já existe")
        return CategoriaModel.with_totals(categoria)

    def list_categorias(self, user_id: str) -> List[Dict[str, Any]]:
        return self._with_totals(user_id, self.categoria_repo.find_by_user(user_id))

    def get_categoria(self, user_id: str, categoria_id: str) -> Dict[str, Any]:
        categoria = self.categoria_repo.find_by_id(categoria_id, user_id)
        if not categoria:
            raise NotFoundError("Categoria não encontrada", key='id')
        return self._with_totals(user_id, [categoria])[0]

    def update_categoria(self, user_id: str, categoria_id: str,
                         dados: CategoriaUpdate) -> Dict[str, Any]:
        categoria = self.categoria_repo.find_by_id(categoria_id, user_id)
        if not categoria:
            raise NotFoundError("Categoria não encontrada", key='id')

        changes = dados.to_document()
        if 'categoryName' in changes:
            self._check_nome_livre(user_id, changes['categoryName'], ignorar_id=categoria['_id'])

        if changes:
            try:
                categoria = self.categoria_repo.update_for_user(categoria['_id'], user_id, changes)
            except DuplicateKeyError:
                raise DuplicateError(f"Categoria '{changes.get('categoryName')}' já existe")
        return self._with_totals(user_id, [categoria])[0]

    def delete_categoria(self, user_id: str, categoria_id: str) -> bool:
        """
        Deleta uma categoria.

        As receitas e compras vinculadas mantêm o categoryId.

        Raises:
            NotFoundError: Se categoria não encontrada ou não pertence ao usuário
        """
        if not self.categoria_repo.delete_for_user(categoria_id, user_id):
            raise NotFoundError("Categoria não encontrada", key='id')
        return True
