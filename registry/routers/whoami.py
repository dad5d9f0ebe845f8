from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from registry.auth.deps import get_current_user
from registry.core.db import get_db
from registry.models.user import User
from registry.schemas.auth import ProfileUpdate, WhoAmIResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def _whoami(user: User) -> WhoAmIResponse:
    return WhoAmIResponse(
        id=user.id,
        user=user.email,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        roles=user.role_names,
    )


@router.get("/whoami", response_model=WhoAmIResponse)
def whoami(user: User = Depends(get_current_user)) -> WhoAmIResponse:
    return _whoami(user)


@router.patch("/me", response_model=WhoAmIResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> WhoAmIResponse:
    """Let the caller edit their own display name and avatar; email and roles stay untouched."""

    account = db.get(User, user.id)
    changes = payload.dict(exclude_unset=True)
    if "full_name" in changes and changes["full_name"] is not None:
        account.full_name = changes["full_name"].strip()
    if "avatar_url" in changes:
        account.avatar_url = changes["avatar_url"] or None
    db.commit()
    db.refresh(account)
    return _whoami(account)
