from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from registry.auth.security import decode_access_token
from registry.core.db import get_db
from registry.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)

USER_ROLE = "User"
ADMIN_ROLE = "Administrator"

# Plain users read and edit records; deletes, raw imports and number overrides are elevated.
READ_ROLES = (USER_ROLE, ADMIN_ROLE)
WRITE_ROLES = (USER_ROLE, ADMIN_ROLE)
ADMIN_ROLES = (ADMIN_ROLE,)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        user_id = decode_access_token(credentials.credentials)
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    return user


def require_roles(*roles: str) -> Callable[[User], User]:
    def checker(user: User = Depends(get_current_user)) -> User:
        if not set(roles) & set(user.role_names):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return checker


def is_admin(user: User) -> bool:
    return ADMIN_ROLE in user.role_names
