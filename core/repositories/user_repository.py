"""
Repository para operações de usuário no MongoDB.

Localização: core/repositories/user_repository.py

Encapsula todas as operações com a collection 'users' no MongoDB.
"""
from typing import Optional, Dict, Any, List
from core.repositories.base_repository import BaseRepository, as_object_id
from core.models.user_model import UserModel
from pymongo import ReturnDocument
from datetime import datetime
import bcrypt


def hash_password(password: str) -> str:
    """Gera o hash bcrypt da senha."""
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt()
    ).decode('utf-8')


class UserRepository(BaseRepository):
    """
    Repository para gerenciar usuários no MongoDB.

    Exemplo de uso:
        repo = UserRepository()
        user = repo.create('user@email.com', 'senha123', name='Ana')
    """

    # Projeção que nunca devolve o hash da senha
    PUBLIC_PROJECTION = {'password_hash': 0}

    def __init__(self):
        super().__init__('users')

    def _ensure_indexes(self):
        """Cria índices necessários."""
        self.collection.create_index('email', unique=True)

    def create(self, email: str, password: str, name: str,
              role: str = UserModel.ROLE_USER, **kwargs) -> Dict[str, Any]:
        """
        Cria um novo usuário.

        Args:
            email: Email do usuário
            password: Senha em texto plano (será hasheada)
            name: Nome de exibição
            role: Role do usuário ('user' ou 'admin', default: 'user')
            **kwargs: Campos demográficos (age, birthdayDate, gender)

        Returns:
            Dict com os dados do usuário criado (sem password_hash)
        """
        user_data = UserModel.create_user_data(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            **kwargs
        )

        result = self.collection.insert_one(user_data)
        user_data['_id'] = result.inserted_id

        # Remove senha do retorno
        user_data.pop('password_hash', None)
        return user_data

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Inclui password_hash: uso interno do login."""
        return self.collection.find_one({'email': email.lower().strip()})

    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Usuário sem o hash da senha, ou None."""
        oid = as_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({'_id': oid}, self.PUBLIC_PROJECTION)

    def list_users(self, limit: int = 100, skip: int = 0) -> List[Dict[str, Any]]:
        """Lista usuários sem o hash da senha."""
        cursor = self.collection.find({}, self.PUBLIC_PROJECTION).sort('created_at', 1)
        return list(cursor.skip(skip).limit(limit))

    def verify_password(self, email: str, password: str) -> bool:
        user = self.find_by_email(email)
        if not user or 'password_hash' not in user:
            return False

        try:
            return bcrypt.checkpw(
                password.encode('utf-8'),
                user['password_hash'].encode('utf-8')
            )
        except ValueError:
            # Hash corrompido/formato desconhecido
            return False

    def update(self, user_id: str, **kwargs) -> Optional[Dict[str, Any]]:
        """
        Atualiza dados do usuário.

        Se 'password' vier nos campos, é convertida em password_hash.

        Args:
            user_id: ID do usuário
            **kwargs: Campos a atualizar

        Returns:
            Usuário atualizado (sem password_hash) ou None se não encontrado
        """
        oid = as_object_id(user_id)
        if oid is None:
            return None

        if 'password' in kwargs:
            kwargs['password_hash'] = hash_password(kwargs.pop('password'))
        if 'email' in kwargs:
            kwargs['email'] = kwargs['email'].lower().strip()

        kwargs['updated_at'] = datetime.utcnow()
        return self.collection.find_one_and_update(
            {'_id': oid},
            {'$set': kwargs},
            projection=self.PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER
        )
