"""Membership number allocation.

Numbers have the shape ``YYYYNNNN``: the admission year followed by a per-church,
per-year sequence. Only even sequences are issued here, starting at ``0002``; odd
sequences belong to numbers assigned outside this service.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from registry.models.member import Member
from registry.services.errors import ConstraintViolation, ExhaustedSequence

logger = logging.getLogger(__name__)

SEQUENCE_START = 2
SEQUENCE_STEP = 2
SEQUENCE_CEILING = 9998
MEMBERSHIP_NUMBER_PATTERN = re.compile(r"^\d{8}$")


def format_membership_number(year: int, sequence: int) -> str:
    return f"{year:04d}{sequence:04d}"


def parse_membership_number(value: str | None) -> tuple[int, int]:
    if not value or not MEMBERSHIP_NUMBER_PATTERN.match(value):
        raise ConstraintViolation(f"Membership number {value!r} must have 8 digits (YYYYNNNN)")
    return int(value[:4]), int(value[4:])


def allocate(existing_numbers: Iterable[str | None], year: int, ceiling: int = SEQUENCE_CEILING) -> str:
    """Return the next free number for ``year`` given the numbers already issued.

    Only numbers whose first four digits equal ``year`` are considered. Raises
    ``ExhaustedSequence`` instead of wrapping once ``ceiling`` is passed.
    """

    if not 1 <= year <= 9999:
        raise ConstraintViolation(f"Admission year {year} cannot be encoded in a membership number")

    prefix = f"{year:04d}"
    highest: int | None = None
    for number in existing_numbers:
        if not number or not MEMBERSHIP_NUMBER_PATTERN.match(number) or not number.startswith(prefix):
            continue
        sequence = int(number[4:])
        if highest is None or sequence > highest:
            highest = sequence

    if highest is None:
        candidate = SEQUENCE_START
    else:
        # smallest even sequence above the highest one, odd imports included
        candidate = (highest // SEQUENCE_STEP + 1) * SEQUENCE_STEP

    if candidate > ceiling:
        raise ExhaustedSequence(
            f"Membership numbers for {prefix} are exhausted: the sequence cannot go past {ceiling:04d}"
        )
    return format_membership_number(year, candidate)


def _lock_church_year(db: Session, church_id: int, year: int) -> None:
    """Serialize allocations for one (church, year) until the transaction ends."""

    if db.get_bind().dialect.name != "postgresql":
        # no lock here; the unique (church_id, membership_number) key rejects a second writer
        return
    db.execute(
        text("SELECT pg_advisory_xact_lock(:church_id, :year)"),
        {"church_id": church_id, "year": year},
    )


def issued_numbers(db: Session, church_id: int, year: int) -> list[str]:
    return list(
        db.execute(
            select(Member.membership_number).where(
                Member.church_id == church_id,
                Member.membership_number.like(f"{year:04d}%"),
            )
        ).scalars()
    )


def allocate_membership_number(db: Session, church_id: int, year: int) -> str:
    _lock_church_year(db, church_id, year)
    try:
        number = allocate(issued_numbers(db, church_id, year), year)
    except ExhaustedSequence:
        logger.warning("membership_sequence_exhausted", extra={"church_id": church_id, "year": year})
        raise
    logger.info(
        "membership_number_allocated",
        extra={"church_id": church_id, "year": year, "membership_number": number},
    )
    return number


def ensure_number_available(
    db: Session,
    church_id: int,
    membership_number: str,
    *,
    exclude_member_id: int | None = None,
) -> None:
    """Reject a manually supplied number that is malformed or already used in the church."""

    parse_membership_number(membership_number)
    query = select(Member.id).where(
        Member.church_id == church_id,
        Member.membership_number == membership_number,
    )
    if exclude_member_id is not None:
        query = query.where(Member.id != exclude_member_id)
    if db.execute(query).first() is not None:
        raise ConstraintViolation(f"Membership number {membership_number} is already used in this church")
