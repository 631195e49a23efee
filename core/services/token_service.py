"""
Service para emissão e validação de tokens de acesso (JWT).

Localização: core/services/token_service.py

A chave de assinatura vem de settings.JWT_SECRET_KEY; nunca fica no código.
"""
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from jose import jwt, JWTError
from core.exceptions import UnauthorizedError


class TokenService:
    """
    Emite e valida tokens Bearer.

    Exemplo de uso:
        service = TokenService()
        token = service.issue(user)
        payload = service.decode(token)
    """

    def __init__(self, secret_key: Optional[str] = None,
                 algorithm: Optional[str] = None,
                 expires_hours: Optional[int] = None):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expires_hours = expires_hours or settings.JWT_EXPIRES_HOURS

        if not self.secret_key:
            raise ImproperlyConfigured("JWT_SECRET_KEY não configurada")

    def issue(self, user: Dict[str, Any]) -> str:
        """
        Gera um token para o usuário.

        Args:
            user: Documento do usuário (precisa de _id e email)

        Returns:
            Token JWT assinado
        """
        expire = datetime.now(timezone.utc) + timedelta(hours=self.expires_hours)
        payload = {
            'sub': str(user['_id']),
            'email': user.get('email'),
            'exp': expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Valida assinatura e expiração do token.

        Raises:
            UnauthorizedError: Se o token for inválido ou estiver expirado
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise UnauthorizedError("Token inválido ou expirado")

        if not payload.get('sub'):
            raise UnauthorizedError("Token inválido ou expirado")
        return payload
