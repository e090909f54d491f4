"""
Hash de contraseñas (bcrypt) y tokens JWT de acceso
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from app.core.config import settings

TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """Un usuario sin hash guardado nunca coincide."""
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Firma un token de acceso con los claims del usuario (sub, username, role).

    Por defecto expira a los ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {**claims, "exp": datetime.now(timezone.utc) + lifetime, "type": TOKEN_TYPE}
    return jwt.encode(payload, settings.APP_SECRET_STRING, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decodifica un JWT; propaga jwt.PyJWTError si es inválido o expiró."""
    return jwt.decode(token, settings.APP_SECRET_STRING, algorithms=[settings.ALGORITHM])
