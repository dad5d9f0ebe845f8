from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from registry.core.db import Base

MemberSex = Enum("Male", "Female", name="member_sex")
MaritalStatus = Enum(
    "Single",
    "Married",
    "Separated",
    "Divorced",
    "Widowed",
    "Common-law union",
    name="marital_status_type",
)
EducationLevel = Enum(
    "Primary school",
    "High school",
    "Vocational/Technical",
    "College/University",
    "Master's",
    "Doctorate",
    "Post-doc",
    "Illiterate",
    "Literate",
    "Not informed",
    name="education_level_type",
)
MemberStatus = Enum("Communicant", "Non-communicant", "Not a member", name="member_status_type")
MemberOffice = Enum("Not an officer", "Deacon", "Elder", "Elder on availability", name="member_office_type")
MemberSituation = Enum("Active", "Inactive", "Attends", name="member_situation_type")
AdmissionMethod = Enum(
    "Baptism",
    "Profession of faith",
    "Baptism and Profession of faith",
    "Transfer",
    "Transfer of guardians",
    "Restoration",
    "Ex-officio jurisdiction",
    "Jurisdiction on request",
    "Jurisdiction over guardians",
    "Presbytery designation",
    name="admission_method_type",
)
DismissalMethod = Enum(
    "Disciplinary exclusion",
    "Exclusion on request",
    "Exclusion due to absence",
    "Transfer",
    "Transfer of guardians",
    "Transfer by session/council",
    "Jurisdiction assumed",
    "Jurisdiction over guardians",
    "Profession of faith",
    "Deceased",
    "Majority/coming of age",
    "Guardians' request",
    name="dismissal_method_type",
)


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("church_id", "membership_number", name="members_church_membership_number_unique"),
        CheckConstraint(
            "(disciplined = false AND discipline_date IS NULL) OR (disciplined = true AND discipline_date IS NOT NULL)",
            name="members_discipline_date_check",
        ),
    )

    id = Column(Integer, primary_key=True)
    photo_url = Column(String(255), nullable=True)
    name = Column(String(200), nullable=False, index=True)
    sex = Column(MemberSex, nullable=False)
    date_of_birth = Column(Date, nullable=True)
    place_of_birth = Column(String(150), nullable=True)
    cpf = Column(String(14), nullable=True, unique=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(25), nullable=True)
    mobile = Column(String(25), nullable=True)
    address = Column(String(255), nullable=True)
    address_line_2 = Column(String(255), nullable=True)
    neighborhood = Column(String(120), nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(2), nullable=True)
    country = Column(String(120), nullable=True, default="Brazil")
    postal_code = Column(String(9), nullable=True)
    marital_status = Column(MaritalStatus, nullable=False, default="Single")
    spouse = Column(String(200), nullable=True)
    wedding_date = Column(Date, nullable=True)
    cpf_rg = Column(String(30), nullable=True)
    issuing_authority = Column(String(60), nullable=True)
    education_level = Column(EducationLevel, nullable=True)
    profession = Column(String(120), nullable=True)
    mother_name = Column(String(200), nullable=True)
    father_name = Column(String(200), nullable=True)

    church_id = Column(Integer, ForeignKey("churches.id", ondelete="RESTRICT"), nullable=False, index=True)
    membership_number = Column(String(8), nullable=True, index=True)
    member_status = Column(MemberStatus, nullable=False, default="Communicant")
    office = Column(MemberOffice, nullable=False, default="Not an officer")
    situation = Column(MemberSituation, nullable=False, default="Active", index=True)
    admission_date = Column(Date, nullable=False)
    admission_method = Column(AdmissionMethod, nullable=False)
    baptism_date = Column(Date, nullable=True)
    baptism_pastor = Column(String(200), nullable=True)
    baptism_church = Column(String(200), nullable=True)
    profession_of_faith_date = Column(Date, nullable=True)
    profession_of_faith_pastor = Column(String(200), nullable=True)
    profession_of_faith_church = Column(String(200), nullable=True)
    dismissal_date = Column(Date, nullable=True)
    dismissal_method = Column(DismissalMethod, nullable=True)
    disciplined = Column(Boolean, nullable=False, default=False)
    discipline_date = Column(Date, nullable=True)
    discipline_notes = Column(Text, nullable=True)
    pending_transfer = Column(Boolean, nullable=False, default=False)
    history = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    church = relationship("Church", back_populates="members")
    relationships = relationship(
        "FamilyRelationship",
        foreign_keys="FamilyRelationship.member_id",
        back_populates="member",
        cascade="all, delete",
        passive_deletes=True,
    )
    audit_entries = relationship(
        "MemberAudit",
        back_populates="member",
        cascade="all, delete",
        passive_deletes=True,
        order_by="MemberAudit.changed_at.desc()",
    )
    created_by = relationship("User", foreign_keys=[created_by_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])

    @property
    def membership_year(self) -> int | None:
        if not self.membership_number:
            return None
        return int(self.membership_number[:4])


class MemberAudit(Base):
    """One changed field of a member record, with who changed it and when."""

    __tablename__ = "member_audit"

    id = Column(Integer, primary_key=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    field = Column(String(100), nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    changed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    changed_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    member = relationship("Member", back_populates="audit_entries")
    actor = relationship("User", back_populates="member_audits")
