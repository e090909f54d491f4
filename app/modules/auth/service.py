from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from typing import List
from uuid import UUID
import logging

from app.modules.auth.models import User
from app.modules.auth.schemas import UserCreate, UserUpdate, TokenResponse, TokenUser
from app.modules.auth.utils import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)

PROTECTED_USERNAME = "admin"


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, username: str, password: str) -> User:
        """Valida usuario activo + contraseña. Mismo error para cualquier fallo."""
        user = self.db.query(User).filter(User.username == username.strip().lower()).first()

        if not user or not user.is_active or not verify_password(password, user.password):
            logger.warning(f"Intento de login fallido para '{username}'")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Credenciales inválidas"
            )

        return user

    def login(self, username: str, password: str) -> TokenResponse:
        """
        Login de usuario. El token lleva username, rol y permisos para que el
        frontend pueda decidir qué mostrar sin otra consulta.
        """
        user = self.authenticate(username, password)

        user.last_login = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(user)

        token_data = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role.value,
            "permissions": user.permissions or [],
        }
        access_token = create_access_token(token_data)

        logger.info(f"Usuario '{user.username}' inició sesión")
        return TokenResponse(
            access_token=access_token,
            user=TokenUser.model_validate(user)
        )


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, user_data: UserCreate) -> User:
        try:
            user = User(
                username=user_data.username,
                name=user_data.name,
                password=hash_password(user_data.password),
                role=user_data.role,
                permissions=user_data.permissions,
                is_active=user_data.is_active
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un usuario con el nombre '{user_data.username}'"
            )

    def get_users(self) -> List[User]:
        return self.db.query(User).order_by(User.name.asc()).all()

    def get_user(self, user_id: UUID) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Usuario no encontrado"
            )
        return user

    def update_user(self, user_id: UUID, user_data: UserUpdate) -> User:
        user = self.get_user(user_id)
        update_data = user_data.model_dump(exclude_unset=True)

        if "password" in update_data:
            password = update_data.pop("password")
            if password:
                user.password = hash_password(password)

        for field, value in update_data.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: UUID) -> None:
        user = self.get_user(user_id)
        if user.username == PROTECTED_USERNAME:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No se puede eliminar el usuario administrador principal"
            )
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Usuario '{user.username}' eliminado")
