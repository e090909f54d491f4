from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.dependencies.dbDependecies import get_db
from app.dependencies.userDependencies import user_dependency, admin_dependency
from app.modules.auth.service import AuthService, UserService
from app.modules.auth.schemas import LoginRequest, TokenResponse, UserCreate, UserUpdate, UserOut

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
users_router = APIRouter(prefix="/users", tags=["Users"])


@auth_router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Login con usuario y contraseña.

    Devuelve un JWT Bearer con `sub`, `username`, `role` y `permissions`.
    """
    auth_service = AuthService(db)
    return auth_service.login(credentials.username, credentials.password)


@auth_router.get("/me", response_model=UserOut)
async def get_current_user_info(current_user: user_dependency):
    """Obtener información del usuario autenticado."""
    return current_user


@users_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, _: admin_dependency, db: Session = Depends(get_db)):
    """Crear usuario (solo ADMIN). La contraseña se guarda con bcrypt."""
    return UserService(db).create_user(user_data)


@users_router.get("", response_model=List[UserOut])
async def list_users(_: admin_dependency, db: Session = Depends(get_db)):
    """Listar usuarios ordenados por nombre."""
    return UserService(db).get_users()


@users_router.get("/{user_id}", response_model=UserOut)
async def get_user(_: admin_dependency, user_id: UUID = Path(..., description="ID del usuario"), db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)


@users_router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_data: UserUpdate,
    _: admin_dependency,
    user_id: UUID = Path(..., description="ID del usuario"),
    db: Session = Depends(get_db)
):
    """Actualizar usuario. Si viene `password` se vuelve a hashear."""
    return UserService(db).update_user(user_id, user_data)


@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(_: admin_dependency, user_id: UUID = Path(..., description="ID del usuario"), db: Session = Depends(get_db)):
    """Eliminar usuario. El usuario `admin` no se puede eliminar."""
    UserService(db).delete_user(user_id)
