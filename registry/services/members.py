"""Member create/update operations.

Creation is the only place a membership number is allocated; updates never
re-allocate, and an explicit overwrite is validated like a manual number.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from registry.models.church import Church
from registry.models.member import Member
from registry.services.audit import record_member_changes, record_membership_number, snapshot_member
from registry.services.errors import InvalidOperation, NotFound
from registry.services.membership_numbers import allocate_membership_number, ensure_number_available
from registry.services.store import flush_or_conflict

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {
    "name",
    "sex",
    "church_id",
    "admission_date",
    "admission_method",
    "marital_status",
    "member_status",
    "office",
    "situation",
    "disciplined",
    "pending_transfer",
}


def get_member_or_404(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise NotFound(f"Member {member_id} not found")
    return member


def _ensure_church(db: Session, church_id: int) -> Church:
    church = db.get(Church, church_id)
    if church is None:
        raise NotFound(f"Church {church_id} not found")
    return church


def _check_discipline(member: Member) -> None:
    if member.disciplined and member.discipline_date is None:
        raise InvalidOperation("Discipline date is required for disciplined members")
    if not member.disciplined and member.discipline_date is not None:
        raise InvalidOperation("Discipline date is only allowed for disciplined members")


def create_member(db: Session, data: dict[str, Any], *, actor_id: int | None = None) -> Member:
    """Insert a member, allocating a membership number unless one was supplied."""

    _ensure_church(db, data["church_id"])
    member = Member(**data, created_by_id=actor_id, updated_by_id=actor_id)
    _check_discipline(member)

    if member.membership_number:
        ensure_number_available(db, member.church_id, member.membership_number)
        allocated = False
    else:
        member.membership_number = allocate_membership_number(db, member.church_id, member.admission_date.year)
        allocated = True

    db.add(member)
    flush_or_conflict(db, f"Membership number {member.membership_number} or CPF is already in use")
    if allocated:
        record_membership_number(db, member, actor_id)

    logger.info(
        "member_created",
        extra={
            "member_id": member.id,
            "church_id": member.church_id,
            "membership_number": member.membership_number,
            "allocated": allocated,
        },
    )
    return member


def update_member(
    db: Session,
    member: Member,
    changes: dict[str, Any],
    *,
    actor_id: int | None = None,
    allow_number_overwrite: bool = False,
) -> Member:
    previous = snapshot_member(member)

    new_number = changes.pop("membership_number", None)
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            raise InvalidOperation(f"{field} cannot be empty")
        setattr(member, field, value)

    if "church_id" in changes:
        _ensure_church(db, member.church_id)
    _check_discipline(member)

    if new_number is not None and new_number != member.membership_number:
        if not allow_number_overwrite:
            raise InvalidOperation("Only administrators can overwrite a membership number")
        ensure_number_available(db, member.church_id, new_number, exclude_member_id=member.id)
        member.membership_number = new_number
    elif "church_id" in changes and member.membership_number:
        ensure_number_available(db, member.church_id, member.membership_number, exclude_member_id=member.id)

    member.updated_by_id = actor_id
    flush_or_conflict(db, "Membership number or CPF is already in use")
    record_member_changes(db, member, previous, actor_id)
    return member
