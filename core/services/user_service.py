"""
Service para o CRUD de usuários.

Localização: core/services/user_service.py

SEGURANÇA: cada operação recebe o usuário autenticado (actor). Usuário comum
só enxerga e altera o próprio cadastro; admin enxerga todos.
"""
from typing import Optional, Dict, Any, List
from pymongo.errors import DuplicateKeyError
from core.repositories.user_repository import UserRepository
from core.models.user_model import UserModel
from core.schemas import UsuarioCreateInput
from core.exceptions import DuplicateError, ForbiddenError, NotFoundError


class UserService:

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.user_repo = user_repo or UserRepository()

    def _check_access(self, actor: Dict[str, Any], user_id: str) -> None:
        if not UserModel.can_access(actor, user_id):
            raise ForbiddenError("Sem permissão para acessar este usuário")

    def list_users(self, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        if UserModel.is_admin(actor):
            return self.user_repo.list_users()
        return [self.get_user(actor, str(actor['_id']))]

    def get_user(self, actor: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        self._check_access(actor, user_id)
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("Usuário não encontrado")
        return user

    def create_user(self, actor: Dict[str, Any], dados: UsuarioCreateInput) -> Dict[str, Any]:
        """Criação administrativa; usuários comuns se cadastram pelo registro."""
        if not UserModel.is_admin(actor):
            raise ForbiddenError("Apenas administradores podem criar usuários")
        if self.user_repo.find_by_email(dados.email):
            raise DuplicateError("Email já cadastrado")

        extras = dados.model_dump(include={'age', 'birthdayDate', 'gender'}, exclude_none=True)
        try:
            return self.user_repo.create(dados.email, dados.password, dados.name,
                                         role=dados.role, **extras)
        except DuplicateKeyError:
            raise DuplicateError("Email já cadastrado")

    def update_user(self, actor: Dict[str, Any], user_id: str,
                    campos: Dict[str, Any]) -> Dict[str, Any]:
        self._check_access(actor, user_id)
        if 'email' in campos:
            existente = self.user_repo.find_by_email(campos['email'])
            if existente and str(existente['_id']) != str(user_id):
                raise DuplicateError("Email já cadastrado")
        if not campos:
            return self.get_user(actor, user_id)

        user = self.user_repo.update(user_id, **campos)
        if not user:
            raise NotFoundError("Usuário não encontrado")
        return user

    def delete_user(self, actor: Dict[str, Any], user_id: str) -> None:
        """
        Remove o usuário.

        Não há cascata: categorias, cartões, contas e lançamentos do usuário
        permanecem no banco.
        """
        self._check_access(actor, user_id)
        if not self.user_repo.delete(user_id):
            raise NotFoundError("Usuário não encontrado")
