from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, validator

from registry.schemas.church import ChurchSummary
from registry.schemas.common import normalize_cpf, normalize_postal_code, normalize_state

MEMBERSHIP_NUMBER_RE = re.compile(r"^\d{8}$")

Sex = Literal["Male", "Female"]
MaritalStatusValue = Literal["Single", "Married", "Separated", "Divorced", "Widowed", "Common-law union"]
EducationLevelValue = Literal[
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
]
MemberStatusValue = Literal["Communicant", "Non-communicant", "Not a member"]
MemberOfficeValue = Literal["Not an officer", "Deacon", "Elder", "Elder on availability"]
MemberSituationValue = Literal["Active", "Inactive", "Attends"]
AdmissionMethodValue = Literal[
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
]
DismissalMethodValue = Literal[
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
]


def normalize_membership_number(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not MEMBERSHIP_NUMBER_RE.match(cleaned):
        raise ValueError("Membership number must have 8 digits (YYYYNNNN)")
    return cleaned


class MemberFields(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    sex: Optional[Sex] = None
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = Field(None, max_length=150)
    cpf: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=25)
    mobile: Optional[str] = Field(None, max_length=25)
    address: Optional[str] = Field(None, max_length=255)
    address_line_2: Optional[str] = Field(None, max_length=255)
    neighborhood: Optional[str] = Field(None, max_length=120)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = None
    country: Optional[str] = Field(None, max_length=120)
    postal_code: Optional[str] = None
    marital_status: Optional[MaritalStatusValue] = None
    spouse: Optional[str] = Field(None, max_length=200)
    wedding_date: Optional[date] = None
    cpf_rg: Optional[str] = Field(None, max_length=30)
    issuing_authority: Optional[str] = Field(None, max_length=60)
    education_level: Optional[EducationLevelValue] = None
    profession: Optional[str] = Field(None, max_length=120)
    mother_name: Optional[str] = Field(None, max_length=200)
    father_name: Optional[str] = Field(None, max_length=200)
    church_id: Optional[int] = Field(None, ge=1)
    member_status: Optional[MemberStatusValue] = None
    office: Optional[MemberOfficeValue] = None
    situation: Optional[MemberSituationValue] = None
    admission_date: Optional[date] = None
    admission_method: Optional[AdmissionMethodValue] = None
    baptism_date: Optional[date] = None
    baptism_pastor: Optional[str] = Field(None, max_length=200)
    baptism_church: Optional[str] = Field(None, max_length=200)
    profession_of_faith_date: Optional[date] = None
    profession_of_faith_pastor: Optional[str] = Field(None, max_length=200)
    profession_of_faith_church: Optional[str] = Field(None, max_length=200)
    dismissal_date: Optional[date] = None
    dismissal_method: Optional[DismissalMethodValue] = None
    disciplined: Optional[bool] = None
    discipline_date: Optional[date] = None
    discipline_notes: Optional[str] = None
    pending_transfer: Optional[bool] = None
    history: Optional[str] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = Field(None, max_length=255)
    membership_number: Optional[str] = None

    @validator("cpf")
    def validate_cpf(cls, value: Optional[str]) -> Optional[str]:
        return normalize_cpf(value)

    @validator("postal_code")
    def validate_postal_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_postal_code(value)

    @validator("state")
    def validate_state(cls, value: Optional[str]) -> Optional[str]:
        return normalize_state(value)

    @validator("membership_number")
    def validate_membership_number(cls, value: Optional[str]) -> Optional[str]:
        return normalize_membership_number(value)

    @validator("date_of_birth", "admission_date")
    def validate_not_future(cls, value: Optional[date]) -> Optional[date]:
        if value and value > date.today():
            raise ValueError("Date cannot be in the future")
        return value


class MemberCreate(MemberFields):
    name: str = Field(..., min_length=2, max_length=200)
    sex: Sex
    church_id: int = Field(..., ge=1)
    admission_date: date
    admission_method: AdmissionMethodValue
    marital_status: MaritalStatusValue = "Single"
    member_status: MemberStatusValue = "Communicant"
    office: MemberOfficeValue = "Not an officer"
    situation: MemberSituationValue = "Active"
    country: Optional[str] = Field("Brazil", max_length=120)
    disciplined: bool = False
    pending_transfer: bool = False


class MemberUpdate(MemberFields):
    pass


class MemberOut(BaseModel):
    id: int
    name: str
    sex: str
    date_of_birth: Optional[date]
    place_of_birth: Optional[str]
    cpf: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    mobile: Optional[str]
    address: Optional[str]
    address_line_2: Optional[str]
    neighborhood: Optional[str]
    city: Optional[str]
    state: Optional[str]
    country: Optional[str]
    postal_code: Optional[str]
    marital_status: str
    spouse: Optional[str]
    wedding_date: Optional[date]
    cpf_rg: Optional[str]
    issuing_authority: Optional[str]
    education_level: Optional[str]
    profession: Optional[str]
    mother_name: Optional[str]
    father_name: Optional[str]
    church_id: int
    church: Optional[ChurchSummary] = None
    membership_number: Optional[str]
    member_status: str
    office: str
    situation: str
    admission_date: date
    admission_method: str
    baptism_date: Optional[date]
    baptism_pastor: Optional[str]
    baptism_church: Optional[str]
    profession_of_faith_date: Optional[date]
    profession_of_faith_pastor: Optional[str]
    profession_of_faith_church: Optional[str]
    dismissal_date: Optional[date]
    dismissal_method: Optional[str]
    disciplined: bool
    discipline_date: Optional[date]
    discipline_notes: Optional[str]
    pending_transfer: bool
    history: Optional[str]
    notes: Optional[str]
    photo_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MemberListItem(BaseModel):
    id: int
    name: str
    sex: str
    church_id: int
    membership_number: Optional[str]
    member_status: str
    situation: str
    admission_date: date
    photo_url: Optional[str]

    class Config:
        from_attributes = True


class MemberListResponse(BaseModel):
    items: List[MemberListItem]
    total: int
    page: int
    page_size: int


class MemberAuditOut(BaseModel):
    id: int
    field: str
    old_value: Optional[str]
    new_value: Optional[str]
    changed_by_id: Optional[int]
    changed_at: datetime

    class Config:
        from_attributes = True
