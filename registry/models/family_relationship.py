from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from registry.core.db import Base

RELATIONSHIP_TYPES = ("Father", "Mother", "Spouse", "Sibling", "Child")

FamilyRelationshipType = Enum(*RELATIONSHIP_TYPES, name="family_relationship_type")


class FamilyRelationship(Base):
    """Directed, typed edge ``member -> related_member``.

    The type names the role ``related_member`` plays for ``member``: ``A -> B: Father``
    reads "B is the father of A".
    """

    __tablename__ = "member_family_relationships"
    __table_args__ = (
        UniqueConstraint(
            "member_id",
            "related_member_id",
            "relationship_type",
            name="member_family_relationships_unique_edge",
        ),
        CheckConstraint("member_id <> related_member_id", name="member_family_relationships_no_self"),
    )

    id = Column(Integer, primary_key=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    related_member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    relationship_type = Column(FamilyRelationshipType, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    member = relationship("Member", foreign_keys=[member_id], back_populates="relationships")
    related_member = relationship("Member", foreign_keys=[related_member_id], lazy="joined")
