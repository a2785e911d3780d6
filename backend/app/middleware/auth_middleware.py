"""Bearer-token gate for admin program management."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from app.database import get_db
from app.models.user import User
from app.config import settings
from app.services.auth_service import ALGORITHM
from app.utils.permissions import ADMIN

# Missing credentials are reported as 401 by get_current_user, not as 403 by HTTPBearer.
security = HTTPBearer(auto_error=False)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message, headers=BEARER_CHALLENGE)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Token is not valid")


def _subject_user_id(payload: dict) -> int:
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise _unauthorized("Token is not valid")
    return int(subject)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("No token, authorization denied")
    user_id = _subject_user_id(decode_token(credentials.credentials))

    account = db.query(User).filter(User.user_id == user_id).first()
    if account is None or not account.is_active:
        raise _unauthorized("Account not found or disabled")
    return account


def require_roles(*roles: str):
    """Dependency factory: the caller must hold one of ``roles``."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Admin privileges required." if roles == (ADMIN,) else "Access denied",
            )
        return current_user
    return checker
