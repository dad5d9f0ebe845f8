from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Integer, String, Table, Text, event
from sqlalchemy.orm import relationship

from registry.core.db import Base
from registry.models.pastor import Presbytery

INDEPENDENT_CHURCH_TYPE = "Church"
DEPENDENT_CHURCH_TYPES = ("Congregation", "Presbyterial Congregation", "Preaching Point")

ChurchType = Enum(INDEPENDENT_CHURCH_TYPE, *DEPENDENT_CHURCH_TYPES, name="church_type")

church_assistant_pastors = Table(
    "church_assistant_pastors",
    Base.metadata,
    Column("church_id", ForeignKey("churches.id", ondelete="CASCADE"), primary_key=True),
    Column("pastor_id", ForeignKey("pastors.id", ondelete="CASCADE"), primary_key=True),
)


class Church(Base):
    __tablename__ = "churches"
    __table_args__ = (
        CheckConstraint("id <> parent_church_id", name="churches_not_self_parent"),
        CheckConstraint(
            "NOT (type = 'Church' AND parent_church_id IS NOT NULL)",
            name="churches_independent_has_no_parent",
        ),
    )

    id = Column(Integer, primary_key=True)
    photo_url = Column(String(255), nullable=True)
    type = Column(ChurchType, nullable=False, default=INDEPENDENT_CHURCH_TYPE, index=True)
    parent_church_id = Column(Integer, ForeignKey("churches.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(String(255), nullable=False)
    neighborhood = Column(String(120), nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(2), nullable=False)
    country = Column(String(120), nullable=False, default="Brazil")
    postal_code = Column(String(9), nullable=False)
    phone = Column(String(25), nullable=False)
    website = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    cnpj = Column(String(18), nullable=False, unique=True)
    lead_pastor_id = Column(Integer, ForeignKey("pastors.id", ondelete="SET NULL"), nullable=True)
    organization_date = Column(Date, nullable=False)
    presbytery = Column(Presbytery, nullable=False, default="PANA", index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    parent = relationship("Church", remote_side=[id], back_populates="congregations")
    congregations = relationship(
        "Church",
        back_populates="parent",
        passive_deletes=True,
        order_by="Church.name",
    )
    lead_pastor = relationship("Pastor", back_populates="led_churches", foreign_keys=[lead_pastor_id])
    assistant_pastors = relationship("Pastor", secondary=church_assistant_pastors, order_by="Pastor.name")
    members = relationship("Member", back_populates="church", passive_deletes=True)

    @property
    def congregations_count(self) -> int:
        return len(self.congregations)

    @property
    def assistant_pastor_ids(self) -> list[int]:
        return [pastor.id for pastor in self.assistant_pastors]

    @property
    def shape(self):
        from registry.services.church_hierarchy import classify_church

        return classify_church(self.type, self.parent_church_id, church_id=self.id)


@event.listens_for(Church, "before_insert")
@event.listens_for(Church, "before_update")
def _check_hierarchy(mapper, connection, target: Church) -> None:
    from registry.services.church_hierarchy import validate_church_write

    validate_church_write(connection, target)
