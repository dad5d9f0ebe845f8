from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.orm import Session

from registry.models.member import Member, MemberAudit

_TRACKED_FIELDS = {
    "name",
    "sex",
    "date_of_birth",
    "cpf",
    "email",
    "phone",
    "mobile",
    "address",
    "city",
    "state",
    "postal_code",
    "marital_status",
    "spouse",
    "church_id",
    "membership_number",
    "member_status",
    "office",
    "situation",
    "admission_date",
    "admission_method",
    "dismissal_date",
    "dismissal_method",
    "disciplined",
    "discipline_date",
    "pending_transfer",
    "photo_url",
}


def snapshot_member(member: Member) -> Dict[str, Any]:
    """Create a snapshot of tracked fields for comparison."""

    return {field: getattr(member, field) for field in _TRACKED_FIELDS}


def _to_string(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def record_member_changes(db: Session, member: Member, previous_snapshot: Dict[str, Any], actor_id: int | None) -> None:
    """Persist audit entries for fields that changed."""

    current_snapshot = snapshot_member(member)
    for field in sorted(previous_snapshot):
        old_value = previous_snapshot[field]
        new_value = current_snapshot.get(field)
        if old_value == new_value:
            continue
        db.add(
            MemberAudit(
                member_id=member.id,
                field=field,
                old_value=_to_string(old_value),
                new_value=_to_string(new_value),
                changed_by_id=actor_id,
            )
        )


def record_membership_number(db: Session, member: Member, actor_id: int | None) -> None:
    db.add(
        MemberAudit(
            member_id=member.id,
            field="membership_number",
            old_value=None,
            new_value=member.membership_number,
            changed_by_id=actor_id,
        )
    )
