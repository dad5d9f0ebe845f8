from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from registry.auth.deps import ADMIN_ROLES, READ_ROLES, WRITE_ROLES, require_roles
from registry.core.db import get_db
from registry.models.pastor import Pastor
from registry.models.user import User
from registry.schemas.pastor import PastorCreate, PastorListResponse, PastorOut, PastorUpdate
from registry.services.store import flush_or_conflict

router = APIRouter(prefix="/pastors", tags=["pastors"])

_NULLABLE_FIELDS = {
    "wife",
    "address_line_2",
    "retirement_date",
    "released_date",
    "deceased_date",
    "notes",
    "photo_url",
}
_STATUS_DATES = (
    ("retired", "retirement_date", "Retirement"),
    ("released_from_office", "released_date", "Release"),
    ("deceased", "deceased_date", "Deceased"),
)


def _get_pastor_or_404(db: Session, pastor_id: int) -> Pastor:
    pastor = db.query(Pastor).filter(Pastor.id == pastor_id).first()
    if not pastor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pastor not found")
    return pastor


def _check_status_dates(pastor: Pastor) -> None:
    for flag, date_field, label in _STATUS_DATES:
        enabled = bool(getattr(pastor, flag))
        has_date = getattr(pastor, date_field) is not None
        if enabled and not has_date:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{label} date is required")
        if has_date and not enabled:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{label} date is only allowed when {flag.replace('_', ' ')} is set",
            )


def _check_unique(db: Session, *, email: str | None, cpf: str | None, exclude_id: int | None = None) -> None:
    if email:
        query = db.query(Pastor.id).filter(func.lower(Pastor.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(Pastor.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Another pastor already uses this email")
    if cpf:
        query = db.query(Pastor.id).filter(Pastor.cpf == cpf)
        if exclude_id is not None:
            query = query.filter(Pastor.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Another pastor already uses this CPF")


@router.get("", response_model=PastorListResponse)
def list_pastors(
    *,
    search: str | None = Query(default=None, min_length=1),
    presbytery: str | None = Query(default=None),
    include_inactive: bool = Query(default=True),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> PastorListResponse:
    query = db.query(Pastor)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(func.lower(Pastor.name).like(pattern))
    if presbytery:
        query = query.filter(Pastor.presbytery == presbytery)
    if not include_inactive:
        query = query.filter(
            Pastor.retired.is_(False),
            Pastor.released_from_office.is_(False),
            Pastor.deceased.is_(False),
        )
    total = query.count()
    items = query.order_by(Pastor.name.asc()).offset((page - 1) * page_size).limit(page_size).all()
    return PastorListResponse(
        items=[PastorOut.from_orm(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=PastorOut, status_code=status.HTTP_201_CREATED)
def create_pastor(
    payload: PastorCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*WRITE_ROLES)),
) -> PastorOut:
    _check_unique(db, email=payload.email, cpf=payload.cpf)
    pastor = Pastor(**payload.dict())
    pastor.name = pastor.name.strip()
    _check_status_dates(pastor)

    db.add(pastor)
    flush_or_conflict(db, "Pastor email or CPF already in use")
    db.commit()
    db.refresh(pastor)
    return PastorOut.from_orm(pastor)


@router.get("/{pastor_id}", response_model=PastorOut)
def get_pastor(
    pastor_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> PastorOut:
    return PastorOut.from_orm(_get_pastor_or_404(db, pastor_id))


@router.patch("/{pastor_id}", response_model=PastorOut)
def update_pastor(
    pastor_id: int,
    payload: PastorUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*WRITE_ROLES)),
) -> PastorOut:
    pastor = _get_pastor_or_404(db, pastor_id)
    changes = payload.dict(exclude_unset=True)
    _check_unique(db, email=changes.get("email"), cpf=changes.get("cpf"), exclude_id=pastor.id)

    for field, value in changes.items():
        if value is None and field not in _NULLABLE_FIELDS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be empty")
        setattr(pastor, field, value)
    _check_status_dates(pastor)

    flush_or_conflict(db, "Pastor email or CPF already in use")
    db.commit()
    db.refresh(pastor)
    return PastorOut.from_orm(pastor)


@router.delete("/{pastor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pastor(
    pastor_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ROLES)),
) -> Response:
    pastor = _get_pastor_or_404(db, pastor_id)
    db.delete(pastor)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
