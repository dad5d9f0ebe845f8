from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from registry.auth.deps import ADMIN_ROLES, READ_ROLES, WRITE_ROLES, is_admin, require_roles
from registry.core.db import get_db
from registry.models.member import Member
from registry.models.user import User
from registry.schemas.family import FamilyMemberOut, RelationshipAddResult, RelationshipCreate, RelationshipOut
from registry.schemas.member import (
    MemberAuditOut,
    MemberCreate,
    MemberListItem,
    MemberListResponse,
    MemberOut,
    MemberSituationValue,
    MemberUpdate,
)
from registry.services import family, members as member_service

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=MemberListResponse)
def list_members(
    *,
    q: str | None = Query(default=None, min_length=1),
    church_id: int | None = Query(default=None, ge=1),
    situation: MemberSituationValue | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> MemberListResponse:
    query = db.query(Member)
    if q:
        pattern = f"%{q.lower()}%"
        query = query.filter(
            or_(
                func.lower(Member.name).like(pattern),
                Member.membership_number.like(f"%{q}%"),
                Member.cpf.like(f"%{q}%"),
            )
        )
    if church_id is not None:
        query = query.filter(Member.church_id == church_id)
    if situation:
        query = query.filter(Member.situation == situation)
    total = query.count()
    items = query.order_by(Member.name.asc(), Member.id.asc()).offset((page - 1) * page_size).limit(page_size).all()
    return MemberListResponse(
        items=[MemberListItem.from_orm(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def create_member(
    payload: MemberCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(*WRITE_ROLES)),
) -> MemberOut:
    data = payload.dict()
    data["name"] = data["name"].strip()
    member = member_service.create_member(db, data, actor_id=user.id)
    db.commit()
    db.refresh(member)
    return MemberOut.from_orm(member)


@router.get("/{member_id}", response_model=MemberOut)
def get_member(
    member_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> MemberOut:
    return MemberOut.from_orm(member_service.get_member_or_404(db, member_id))


@router.patch("/{member_id}", response_model=MemberOut)
def update_member(
    member_id: int,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles(*WRITE_ROLES)),
) -> MemberOut:
    member = member_service.get_member_or_404(db, member_id)
    member_service.update_member(
        db,
        member,
        payload.dict(exclude_unset=True),
        actor_id=user.id,
        allow_number_overwrite=is_admin(user),
    )
    db.commit()
    db.refresh(member)
    return MemberOut.from_orm(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ROLES)),
) -> Response:
    member = member_service.get_member_or_404(db, member_id)
    db.delete(member)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{member_id}/audit", response_model=list[MemberAuditOut])
def list_member_audit(
    member_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> list[MemberAuditOut]:
    member = member_service.get_member_or_404(db, member_id)
    return [MemberAuditOut.from_orm(entry) for entry in member.audit_entries]


@router.get("/{member_id}/family", response_model=list[FamilyMemberOut])
def get_family(
    member_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*READ_ROLES)),
) -> list[FamilyMemberOut]:
    return [FamilyMemberOut.from_orm(entry) for entry in family.get_family(db, member_id)]


@router.post("/{member_id}/family", response_model=RelationshipAddResult, status_code=status.HTTP_201_CREATED)
def add_family_relationship(
    member_id: int,
    payload: RelationshipCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*WRITE_ROLES)),
) -> RelationshipAddResult:
    added = family.add_relationship(db, member_id, payload.related_member_id, payload.relationship_type)
    db.commit()
    return RelationshipAddResult(
        edge=RelationshipOut.from_orm(added.edge),
        mirror=RelationshipOut.from_orm(added.mirror) if added.mirror is not None else None,
    )
