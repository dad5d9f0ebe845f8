"""Two-level church hierarchy: independent churches and their congregations.

Every insert or update of a ``Church`` row passes through ``validate_church_write``
(wired as a mapper event in ``registry.models.church``), so the shape rules hold
whichever code path writes the row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registry.models.church import DEPENDENT_CHURCH_TYPES, INDEPENDENT_CHURCH_TYPE, Church
from registry.services.errors import ConstraintViolation, InvalidOperation, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Independent:
    church_id: int | None


@dataclass(frozen=True)
class Dependent:
    church_id: int | None
    parent_id: int


ChurchShape = Union[Independent, Dependent]


def classify_church(church_type: str, parent_church_id: int | None, *, church_id: int | None = None) -> ChurchShape:
    if church_type == INDEPENDENT_CHURCH_TYPE:
        if parent_church_id is not None:
            raise InvalidOperation("A church of type Church cannot have a parent church")
        return Independent(church_id)
    if church_type not in DEPENDENT_CHURCH_TYPES:
        raise InvalidOperation(f"Unknown church type {church_type!r}")
    if parent_church_id is None:
        raise InvalidOperation(f"A {church_type} must have a parent church")
    if church_id is not None and church_id == parent_church_id:
        raise InvalidOperation("A church cannot be its own parent")
    return Dependent(church_id, parent_church_id)


def _check_shape(connection: Connection, target: Church) -> ChurchShape:
    shape = classify_church(target.type, target.parent_church_id, church_id=target.id)

    if isinstance(shape, Dependent):
        parent_type = connection.execute(
            select(Church.type).where(Church.id == shape.parent_id)
        ).scalar_one_or_none()
        if parent_type is None:
            raise NotFound(f"Parent church {shape.parent_id} not found")
        if parent_type != INDEPENDENT_CHURCH_TYPE:
            raise InvalidOperation("The parent church must be of type Church; congregations cannot be nested")

        if target.id is not None:
            dependents = connection.execute(
                select(func.count()).select_from(Church).where(Church.parent_church_id == target.id)
            ).scalar_one()
            if dependents:
                raise InvalidOperation(
                    f"Church {target.id} has {dependents} congregation(s) and cannot become a {target.type}"
                )
    return shape


def validate_church_write(connection: Connection, target: Church) -> ChurchShape:
    try:
        return _check_shape(connection, target)
    except (InvalidOperation, NotFound) as exc:
        logger.warning(
            "church_hierarchy_rejected",
            extra={
                "church_id": target.id,
                "type": target.type,
                "parent_church_id": target.parent_church_id,
                "reason": str(exc),
            },
        )
        raise


def get_church_or_404(db: Session, church_id: int) -> Church:
    church = db.get(Church, church_id)
    if church is None:
        raise NotFound(f"Church {church_id} not found")
    return church


def get_congregations(db: Session, church_id: int) -> list[Church]:
    """Direct dependents of ``church_id``; depth is capped at two so no recursion is needed."""

    get_church_or_404(db, church_id)
    return list(
        db.execute(
            select(Church).where(Church.parent_church_id == church_id).order_by(Church.name.asc(), Church.id.asc())
        ).scalars()
    )


def get_congregation_count(db: Session, church_id: int) -> int:
    get_church_or_404(db, church_id)
    return db.execute(
        select(func.count()).select_from(Church).where(Church.parent_church_id == church_id)
    ).scalar_one()


def can_delete_church(db: Session, church_id: int) -> bool:
    return get_congregation_count(db, church_id) == 0


def delete_church(db: Session, church_id: int) -> None:
    """Delete a church that has no congregations.

    Churches with live dependents are refused rather than orphaning them; reparent or
    delete the congregations first.
    """

    church = get_church_or_404(db, church_id)
    count = get_congregation_count(db, church_id)
    if count:
        raise InvalidOperation(f"Church {church_id} still has {count} congregation(s); move or delete them first")
    db.delete(church)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Church {church_id} still has members and cannot be deleted") from exc
    logger.info("church_deleted", extra={"church_id": church_id, "type": church.type})
