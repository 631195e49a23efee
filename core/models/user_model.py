"""
Modelo de usuário com suporte a roles.

Localização: core/models/user_model.py

Este módulo define a estrutura de dados do usuário no MongoDB.
Usuário é dono de categorias, cartões, contas, compras e receitas através
do campo userId desses documentos (não há lista de filhos no usuário).
"""
from typing import Optional, Dict, Any
from datetime import datetime


class UserModel:
    """
    Modelo de usuário com suporte a roles.

    Schema no MongoDB:
    {
      _id: ObjectId,
      email: String (único),
      password_hash: String,
      name: String,
      age: Number,               // opcional
      birthdayDate: ISODate,     // opcional
      gender: String,            // 'M' | 'F', opcional
      role: String,              // 'user', 'admin'
      is_active: Boolean,
      created_at: ISODate,
      updated_at: ISODate
    }
    """

    # Roles disponíveis
    ROLE_USER = 'user'
    ROLE_ADMIN = 'admin'

    # Roles válidas
    VALID_ROLES = [ROLE_USER, ROLE_ADMIN]

    GENEROS = ['M', 'F']

    @staticmethod
    def create_user_data(email: str, password_hash: str, name: str,
                        role: str = ROLE_USER,
                        age: Optional[int] = None,
                        birthdayDate: Optional[datetime] = None,
                        gender: Optional[str] = None) -> Dict[str, Any]:
        """
        Cria estrutura de dados do usuário.

        Args:
            email: Email do usuário
            password_hash: Hash da senha
            name: Nome de exibição
            role: Role do usuário (default: 'user')
            age: Idade (opcional)
            birthdayDate: Data de nascimento (opcional)
            gender: 'M' ou 'F' (opcional)

        Returns:
            Dict com dados do usuário
        """
        if role not in UserModel.VALID_ROLES:
            role = UserModel.ROLE_USER

        now = datetime.utcnow()
        user_data = {
            'email': email.lower().strip(),
            'password_hash': password_hash,
            'name': name.strip(),
            'role': role,
            'is_active': True,
            'created_at': now,
            'updated_at': now,
        }

        # Campos demográficos só são gravados quando informados
        if age is not None:
            user_data['age'] = age
        if birthdayDate is not None:
            user_data['birthdayDate'] = birthdayDate
        if gender is not None:
            user_data['gender'] = gender

        return user_data

    @staticmethod
    def is_admin(user: Dict[str, Any]) -> bool:
        """
        Verifica se usuário é admin.

        Args:
            user: Dict com dados do usuário

        Returns:
            True se usuário é admin
        """
        return bool(user) and user.get('role') == UserModel.ROLE_ADMIN

    @staticmethod
    def can_access(actor: Dict[str, Any], target_user_id: str) -> bool:
        """Usuário só acessa o próprio cadastro, exceto admin."""
        if UserModel.is_admin(actor):
            return True
        return str(actor.get('_id')) == str(target_user_id)
