"""
Dependencias de autenticación para FastAPI.
"""
from typing import List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from uuid import UUID
import jwt

from app.database.database import get_db
from app.modules.auth.models import User, UserRole
from app.modules.auth.utils import decode_token

# Security scheme
security = HTTPBearer()


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Obtener usuario actual desde token JWT.
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudieron validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = decode_token(credentials.credentials)
            user_id = UUID(payload.get("sub"))
        except (jwt.PyJWTError, TypeError, ValueError):
            raise credentials_exception

        user = db.query(User).filter(User.id == user_id).first()

        if user is None or not user.is_active:
            raise credentials_exception

        return user

    @staticmethod
    def require_roles(allowed_roles: List[UserRole]):
        """
        Dependencia para requerir roles específicos.
        """
        def role_checker(current_user: User = Depends(AuthDependencies.get_current_user)) -> User:
            if current_user.role not in allowed_roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Se requiere uno de estos roles: {', '.join(r.value for r in allowed_roles)}"
                )
            return current_user
        return role_checker

    @staticmethod
    def require_admin():
        """Dependencia para requerir rol de administrador."""
        return AuthDependencies.require_roles([UserRole.ADMIN])

    @staticmethod
    def require_supervisor():
        """Administradores y supervisores."""
        return AuthDependencies.require_roles([UserRole.ADMIN, UserRole.SUPERVISOR])


# Instancias de dependencias
get_current_user = AuthDependencies.get_current_user
require_roles = AuthDependencies.require_roles
require_admin = AuthDependencies.require_admin
require_supervisor = AuthDependencies.require_supervisor
