from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, validator

from registry.schemas.common import Presbytery, normalize_cpf, normalize_postal_code, normalize_state


class PastorBase(BaseModel):
    office: Literal["Pastor"] = "Pastor"
    name: str = Field(..., min_length=2, max_length=150)
    wife: Optional[str] = Field(None, max_length=150)
    address: str = Field(..., min_length=1, max_length=255)
    address_line_2: Optional[str] = Field(None, max_length=255)
    neighborhood: str = Field(..., min_length=1, max_length=120)
    city: str = Field(..., min_length=1, max_length=120)
    state: str
    country: str = Field("Brazil", max_length=120)
    postal_code: str
    phone: str = Field(..., min_length=3, max_length=25)
    mobile: str = Field(..., min_length=3, max_length=25)
    email: EmailStr
    cpf: str
    date_of_birth: date
    ordination_date: date
    presbytery: Presbytery = "PANA"
    retired: bool = False
    retirement_date: Optional[date] = None
    released_from_office: bool = False
    released_date: Optional[date] = None
    deceased: bool = False
    deceased_date: Optional[date] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = Field(None, max_length=255)

    @validator("cpf")
    def validate_cpf(cls, value: Optional[str]) -> Optional[str]:
        return normalize_cpf(value)

    @validator("postal_code")
    def validate_postal_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_postal_code(value)

    @validator("state")
    def validate_state(cls, value: Optional[str]) -> Optional[str]:
        return normalize_state(value)


class PastorCreate(PastorBase):
    pass


class PastorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=150)
    wife: Optional[str] = Field(None, max_length=150)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    address_line_2: Optional[str] = Field(None, max_length=255)
    neighborhood: Optional[str] = Field(None, min_length=1, max_length=120)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    state: Optional[str] = None
    country: Optional[str] = Field(None, max_length=120)
    postal_code: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=3, max_length=25)
    mobile: Optional[str] = Field(None, min_length=3, max_length=25)
    email: Optional[EmailStr] = None
    cpf: Optional[str] = None
    date_of_birth: Optional[date] = None
    ordination_date: Optional[date] = None
    presbytery: Optional[Presbytery] = None
    retired: Optional[bool] = None
    retirement_date: Optional[date] = None
    released_from_office: Optional[bool] = None
    released_date: Optional[date] = None
    deceased: Optional[bool] = None
    deceased_date: Optional[date] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = Field(None, max_length=255)

    @validator("cpf")
    def validate_cpf(cls, value: Optional[str]) -> Optional[str]:
        return normalize_cpf(value)

    @validator("postal_code")
    def validate_postal_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_postal_code(value)

    @validator("state")
    def validate_state(cls, value: Optional[str]) -> Optional[str]:
        return normalize_state(value)


class PastorOut(PastorBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PastorSummary(BaseModel):
    id: int
    name: str
    presbytery: str

    class Config:
        from_attributes = True


class PastorListResponse(BaseModel):
    items: List[PastorOut]
    total: int
    page: int
    page_size: int
