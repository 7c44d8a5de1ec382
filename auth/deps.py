import logging
import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from auth.security import decode_access_token
from db.database import get_db
from models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Please authenticate.") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None:
        raise _unauthorized()

    try:
        payload = decode_access_token(credentials.credentials)

        user_id = payload.get("sub")
        if not user_id:
            raise JWTError("Missing subject claim")
        user_id = uuid.UUID(user_id)

    except (JWTError, ValueError) as e:
        logger.warning("JWT validation failed: %s", e)
        raise _unauthorized()

    user = db.get(User, user_id)
    if user is None:
        logger.warning("Token subject %s does not match any user", user_id)
        raise _unauthorized()

    return user
