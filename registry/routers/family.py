from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from registry.auth.deps import ADMIN_ROLES, require_roles
from registry.core.db import get_db
from registry.models.user import User
from registry.schemas.family import RelationshipImport, RelationshipOut
from registry.services import family

router = APIRouter(prefix="/family-relationships", tags=["family"])


@router.delete("/{relationship_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_relationship(
    relationship_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ROLES)),
) -> Response:
    family.remove_relationship(db, relationship_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/import", response_model=list[RelationshipOut], status_code=status.HTTP_201_CREATED)
def import_relationships(
    payload: RelationshipImport,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ROLES)),
) -> list[RelationshipOut]:
    created = family.import_relationship_edges(
        db,
        ((edge.member_id, edge.related_member_id, edge.relationship_type) for edge in payload.edges),
    )
    db.commit()
    return [RelationshipOut.from_orm(edge) for edge in created]
