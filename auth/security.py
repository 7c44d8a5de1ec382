import os
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import jwt

JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise RuntimeError("JWT_SECRET is not set in environment variables")
    return secret


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id) -> str:
    expire_days = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + timedelta(days=expire_days),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError for bad signatures, expired or malformed tokens"""
    return jwt.decode(token, _jwt_secret(), algorithms=[JWT_ALGORITHM])
