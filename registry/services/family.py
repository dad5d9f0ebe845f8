"""Family relationship graph between members.

``add_relationship`` is the sanctioned way to link two members: it writes the
requested edge and its mirror in the same flush. ``import_relationship_edges``
writes edges exactly as given, with no mirror, for historical imports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from registry.models.family_relationship import RELATIONSHIP_TYPES, FamilyRelationship
from registry.models.member import Member
from registry.services.errors import DuplicateEdge, InvalidOperation, NotFound
from registry.services.store import flush_or_conflict

logger = logging.getLogger(__name__)

MIRROR_TYPES = {
    "Father": "Child",
    "Mother": "Child",
    "Spouse": "Spouse",
    "Sibling": "Sibling",
}
PARENT_TYPE_BY_SEX = {"Male": "Father", "Female": "Mother"}
DISPLAY_ORDER = {"Father": 0, "Mother": 1, "Spouse": 2, "Sibling": 3, "Child": 4}


@dataclass
class AddedRelationship:
    edge: FamilyRelationship
    mirror: FamilyRelationship | None


@dataclass
class FamilyEntry:
    relationship_id: int
    relationship_type: str
    member: Member


def mirror_type(relationship_type: str, member: Member) -> str:
    """Type of the inverse edge ``related -> member``.

    ``A -> B: Child`` (B is A's child) mirrors to ``B -> A: Father`` or ``Mother``
    depending on A's sex, so ``member`` must be the source member A.
    """

    if relationship_type == "Child":
        parent_type = PARENT_TYPE_BY_SEX.get(member.sex)
        if parent_type is None:
            raise InvalidOperation(f"Cannot tell whether member {member.id} is a father or a mother")
        return parent_type
    try:
        return MIRROR_TYPES[relationship_type]
    except KeyError:
        raise InvalidOperation(f"Unknown relationship type {relationship_type!r}") from None


def _edge_exists(db: Session, member_id: int, related_member_id: int, relationship_type: str) -> bool:
    return (
        db.execute(
            select(FamilyRelationship.id).where(
                FamilyRelationship.member_id == member_id,
                FamilyRelationship.related_member_id == related_member_id,
                FamilyRelationship.relationship_type == relationship_type,
            )
        ).first()
        is not None
    )


def _get_member(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise NotFound(f"Member {member_id} not found")
    return member


def add_relationship(db: Session, member_id: int, related_member_id: int, relationship_type: str) -> AddedRelationship:
    if relationship_type not in RELATIONSHIP_TYPES:
        raise InvalidOperation(f"Unknown relationship type {relationship_type!r}")

    member = _get_member(db, member_id)
    _get_member(db, related_member_id)
    if member_id == related_member_id:
        raise InvalidOperation("A member cannot be related to themselves")
    if _edge_exists(db, member_id, related_member_id, relationship_type):
        raise DuplicateEdge(f"Member {related_member_id} is already recorded as {relationship_type} of member {member_id}")

    inverse_type = mirror_type(relationship_type, member)
    edge = FamilyRelationship(
        member_id=member_id,
        related_member_id=related_member_id,
        relationship_type=relationship_type,
    )
    db.add(edge)

    mirror: FamilyRelationship | None = None
    if not _edge_exists(db, related_member_id, member_id, inverse_type):
        mirror = FamilyRelationship(
            member_id=related_member_id,
            related_member_id=member_id,
            relationship_type=inverse_type,
        )
        db.add(mirror)

    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEdge(
            f"Member {related_member_id} is already recorded as {relationship_type} of member {member_id}"
        ) from exc

    logger.info(
        "family_relationship_added",
        extra={
            "member_id": member_id,
            "related_member_id": related_member_id,
            "relationship_type": relationship_type,
            "edge_id": edge.id,
            "mirror_id": mirror.id if mirror is not None else None,
        },
    )
    return AddedRelationship(edge=edge, mirror=mirror)


def remove_relationship(db: Session, edge_id: int) -> FamilyRelationship:
    """Delete one edge. The mirror, if any, is left in place."""

    edge = db.get(FamilyRelationship, edge_id)
    if edge is None:
        raise NotFound(f"Family relationship {edge_id} not found")
    db.delete(edge)
    db.flush()
    logger.info(
        "family_relationship_removed",
        extra={
            "edge_id": edge_id,
            "member_id": edge.member_id,
            "related_member_id": edge.related_member_id,
            "relationship_type": edge.relationship_type,
        },
    )
    return edge


def import_relationship_edges(db: Session, edges: Iterable[tuple[int, int, str]]) -> list[FamilyRelationship]:
    created = [
        FamilyRelationship(
            member_id=member_id,
            related_member_id=related_member_id,
            relationship_type=relationship_type,
        )
        for member_id, related_member_id, relationship_type in edges
    ]
    db.add_all(created)
    flush_or_conflict(db, "Imported relationships violate the relationship constraints")
    logger.info("family_edges_imported", extra={"count": len(created)})
    return created


def get_family(db: Session, member_id: int) -> list[FamilyEntry]:
    """Edges leaving ``member_id``, parents first, then spouse, siblings and children."""

    _get_member(db, member_id)
    edges = (
        db.execute(
            select(FamilyRelationship)
            .options(joinedload(FamilyRelationship.related_member))
            .where(FamilyRelationship.member_id == member_id)
        )
        .unique()
        .scalars()
        .all()
    )
    entries = [
        FamilyEntry(relationship_id=edge.id, relationship_type=edge.relationship_type, member=edge.related_member)
        for edge in edges
    ]
    entries.sort(
        key=lambda entry: (DISPLAY_ORDER[entry.relationship_type], entry.member.name.lower(), entry.relationship_id)
    )
    return entries
