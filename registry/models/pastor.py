from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from registry.core.db import Base

OfficeRole = Enum("Pastor", name="office_role")
Presbytery = Enum("PANA", "PNAN", name="presbytery_type")


class Pastor(Base):
    __tablename__ = "pastors"
    __table_args__ = (
        CheckConstraint(
            "(retired = false AND retirement_date IS NULL) OR (retired = true AND retirement_date IS NOT NULL)",
            name="pastors_retirement_date_check",
        ),
        CheckConstraint(
            "(released_from_office = false AND released_date IS NULL) "
            "OR (released_from_office = true AND released_date IS NOT NULL)",
            name="pastors_released_date_check",
        ),
        CheckConstraint(
            "(deceased = false AND deceased_date IS NULL) OR (deceased = true AND deceased_date IS NOT NULL)",
            name="pastors_deceased_date_check",
        ),
    )

    id = Column(Integer, primary_key=True)
    photo_url = Column(String(255), nullable=True)
    office = Column(OfficeRole, nullable=False, default="Pastor")
    name = Column(String(150), nullable=False, index=True)
    wife = Column(String(150), nullable=True)
    address = Column(String(255), nullable=False)
    address_line_2 = Column(String(255), nullable=True)
    neighborhood = Column(String(120), nullable=False)
    city = Column(String(120), nullable=False, index=True)
    state = Column(String(2), nullable=False, index=True)
    country = Column(String(120), nullable=False, default="Brazil")
    postal_code = Column(String(9), nullable=False)
    phone = Column(String(25), nullable=False)
    mobile = Column(String(25), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    cpf = Column(String(14), nullable=False, unique=True, index=True)
    date_of_birth = Column(Date, nullable=False)
    ordination_date = Column(Date, nullable=False)
    presbytery = Column(Presbytery, nullable=False, default="PANA", index=True)
    retired = Column(Boolean, nullable=False, default=False)
    retirement_date = Column(Date, nullable=True)
    released_from_office = Column(Boolean, nullable=False, default=False)
    released_date = Column(Date, nullable=True)
    deceased = Column(Boolean, nullable=False, default=False)
    deceased_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    led_churches = relationship("Church", back_populates="lead_pastor", foreign_keys="Church.lead_pastor_id")
