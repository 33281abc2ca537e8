# dependencies.py
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from careerlink.config import is_admin_email
from careerlink.database import get_db
from careerlink.models.user import User
from careerlink.utils.jwt_handler import token_user_id


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    user = db.get(User, token_user_id(token))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def has_any_role(user: User, roles) -> bool:
    # Allowlisted e-mails gain "admin" on top of the role they registered with.
    allowed = set(roles)
    if user.role in allowed:
        return True
    return "admin" in allowed and is_admin_email(user.email or "")


def require_roles(*roles: str) -> Callable[..., User]:
    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_any_role(current_user, roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role}' is not authorized to access this route",
            )
        return current_user

    return _dependency
