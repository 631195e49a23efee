"""
Service para lógica de autenticação.

Localização: core/services/auth_service.py

Este service contém a lógica de negócio relacionada a autenticação.
Ele usa o UserRepository para acessar dados e o TokenService para emitir
o token de acesso.
"""
import logging
from typing import Optional, Dict, Any, Tuple
from pymongo.errors import DuplicateKeyError
from core.repositories.user_repository import UserRepository
from core.services.token_service import TokenService
from core.schemas import RegistroInput
from core.exceptions import DuplicateError, UnauthorizedError

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service para gerenciar autenticação de usuários.

    Exemplo de uso:
        service = AuthService()
        user, token = service.authenticate('user@email.com', 'senha123')
    """

    def __init__(self, user_repo: Optional[UserRepository] = None,
                 token_service: Optional[TokenService] = None):
        self.user_repo = user_repo or UserRepository()
        self.token_service = token_service or TokenService()

    def register(self, dados: RegistroInput) -> Tuple[Dict[str, Any], str]:
        """
        Registra um novo usuário e emite o token de acesso.

        A conferência de senha e o formato dos campos já foram validados
        pelo schema; aqui ficam as regras que dependem do banco.

        Args:
            dados: Entrada validada do registro

        Returns:
            Tupla (usuário criado sem senha, token)

        Raises:
            DuplicateError: Se o email já estiver cadastrado
        """
        if self.user_repo.find_by_email(dados.email):
            raise DuplicateError("Email já cadastrado")

        extras = dados.model_dump(include={'age', 'birthdayDate', 'gender'}, exclude_none=True)
        try:
            user = self.user_repo.create(dados.email, dados.password, dados.name, **extras)
        except DuplicateKeyError:
            # Dois registros simultâneos com o mesmo email: o índice único decide
            raise DuplicateError("Email já cadastrado")

        logger.info("Usuário registrado: %s", user['_id'])
        return user, self.token_service.issue(user)

    def authenticate(self, email: str, password: str) -> Tuple[Dict[str, Any], str]:
        """
        Autentica um usuário.

        Args:
            email: Email do usuário
            password: Senha em texto plano

        Returns:
            Tupla (usuário sem senha, token)

        Raises:
            UnauthorizedError: Email inexistente ou senha incorreta
        """
        if not email or not password:
            raise UnauthorizedError("Email ou senha inválidos")

        if not self.user_repo.verify_password(email, password):
            logger.info("Falha de login para %s", email)
            raise UnauthorizedError("Email ou senha inválidos")

        user = self.user_repo.find_by_email(email)
        user.pop('password_hash', None)
        return user, self.token_service.issue(user)

    def get_user_from_token(self, token: str) -> Dict[str, Any]:
        """
        Resolve o usuário dono do token.

        Raises:
            UnauthorizedError: Token inválido ou usuário inexistente/inativo
        """
        payload = self.token_service.decode(token)
        user = self.user_repo.find_by_id(payload['sub'])
        if not user or not user.get('is_active', True):
            raise UnauthorizedError("Usuário não encontrado para o token informado")
        return user
