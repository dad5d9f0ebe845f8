from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from registry.auth.deps import ADMIN_ROLES, READ_ROLES, WRITE_ROLES, require_roles
from registry.core.db import get_db
from registry.models.church import Church
from registry.models.pastor import Pastor
from registry.models.user import User
from registry.schemas.church import (
    CanDeleteOut,
    ChurchCreate,
    ChurchListResponse,
    ChurchOut,
    ChurchTypeValue,
    ChurchUpdate,
    CongregationCountOut,
)
from registry.services import church_hierarchy
from registry.services.errors import NotFound
from registry.services.store import flush_or_conflict

router = APIRouter(prefix="/churches", tags=["churches"])

_NULLABLE_FIELDS = {"parent_church_id", "lead_pastor_id", "website", "notes", "photo_url"}


def _resolve_pastor(db: Session, pastor_id: int) -> Pastor:
    pastor = db.get(Pastor, pastor_id)
    if pastor is None:
        raise NotFound(f"Pastor {pastor_id} not found")
    return pastor


def _resolve_pastors(db: Session, pastor_ids: Iterable[int]) -> list[Pastor]:
    return [_resolve_pastor(db, pastor_id) for pastor_id in pastor_ids]


@router.get("", response_model=ChurchListResponse)
def list_churches(
    *,
    q: str | None = Query(default=None, min_length=1),
    type: ChurchTypeValue | None = Query(default=None),
    parent_church_id: int | None = Query(default=None, ge=1),
    presbytery: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> ChurchListResponse:
    query = db.query(Church)
    if q:
        pattern = f"%{q.lower()}%"
        query = query.filter(func.lower(Church.name).like(pattern) | func.lower(Church.city).like(pattern))
    if type:
        query = query.filter(Church.type == type)
    if parent_church_id is not None:
        query = query.filter(Church.parent_church_id == parent_church_id)
    if presbytery:
        query = query.filter(Church.presbytery == presbytery)
    total = query.count()
    items = query.order_by(Church.name.asc(), Church.id.asc()).offset((page - 1) * page_size).limit(page_size).all()
    return ChurchListResponse(
        items=[ChurchOut.from_orm(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=ChurchOut, status_code=status.HTTP_201_CREATED)
def create_church(
    payload: ChurchCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*WRITE_ROLES)),
) -> ChurchOut:
    data = payload.dict(exclude={"lead_pastor_id", "assistant_pastor_ids"})
    church = Church(**data)
    church.name = church.name.strip()
    if payload.lead_pastor_id is not None:
        church.lead_pastor = _resolve_pastor(db, payload.lead_pastor_id)
    church.assistant_pastors = _resolve_pastors(db, payload.assistant_pastor_ids)

    db.add(church)
    flush_or_conflict(db, "Another church already uses this CNPJ")
    db.commit()
    db.refresh(church)
    return ChurchOut.from_orm(church)


@router.get("/{church_id}", response_model=ChurchOut)
def get_church(
    church_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> ChurchOut:
    return ChurchOut.from_orm(church_hierarchy.get_church_or_404(db, church_id))


@router.patch("/{church_id}", response_model=ChurchOut)
def update_church(
    church_id: int,
    payload: ChurchUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*WRITE_ROLES)),
) -> ChurchOut:
    church = church_hierarchy.get_church_or_404(db, church_id)
    changes = payload.dict(exclude_unset=True)

    # 0 clears the reference
    for field in ("parent_church_id", "lead_pastor_id"):
        if changes.get(field) == 0:
            changes[field] = None

    assistant_ids = changes.pop("assistant_pastor_ids", None)
    if "lead_pastor_id" in changes:
        lead_id = changes.pop("lead_pastor_id")
        church.lead_pastor = _resolve_pastor(db, lead_id) if lead_id is not None else None
    if assistant_ids is not None:
        church.assistant_pastors = _resolve_pastors(db, assistant_ids)

    for field, value in changes.items():
        if value is None and field not in _NULLABLE_FIELDS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be empty")
        setattr(church, field, value)

    flush_or_conflict(db, "Another church already uses this CNPJ")
    db.commit()
    db.refresh(church)
    return ChurchOut.from_orm(church)


@router.delete("/{church_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_church(
    church_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ROLES)),
) -> Response:
    church_hierarchy.delete_church(db, church_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{church_id}/congregations", response_model=list[ChurchOut])
def list_congregations(
    church_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> list[ChurchOut]:
    return [ChurchOut.from_orm(item) for item in church_hierarchy.get_congregations(db, church_id)]


@router.get("/{church_id}/congregations/count", response_model=CongregationCountOut)
def count_congregations(
    church_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> CongregationCountOut:
    return CongregationCountOut(
        church_id=church_id,
        congregations_count=church_hierarchy.get_congregation_count(db, church_id),
    )


@router.get("/{church_id}/can-delete", response_model=CanDeleteOut)
def can_delete(
    church_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> CanDeleteOut:
    count = church_hierarchy.get_congregation_count(db, church_id)
    return CanDeleteOut(church_id=church_id, can_delete=count == 0, congregations_count=count)
