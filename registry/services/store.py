from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registry.services.errors import ConstraintViolation

logger = logging.getLogger(__name__)


def flush_or_conflict(db: Session, message: str) -> None:
    """Flush pending writes, turning store constraint failures into ``ConstraintViolation``."""

    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("store_constraint_violation", extra={"reason": str(exc.orig)})
        raise ConstraintViolation(message) from exc
