from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, validator

from registry.schemas.common import Presbytery, normalize_cnpj, normalize_postal_code, normalize_state
from registry.schemas.pastor import PastorSummary

ChurchTypeValue = Literal["Church", "Congregation", "Presbyterial Congregation", "Preaching Point"]


class ChurchBase(BaseModel):
    type: ChurchTypeValue = "Church"
    parent_church_id: Optional[int] = Field(None, ge=1)
    name: str = Field(..., min_length=2, max_length=200)
    address: str = Field(..., min_length=1, max_length=255)
    neighborhood: str = Field(..., min_length=1, max_length=120)
    city: str = Field(..., min_length=1, max_length=120)
    state: str
    country: str = Field("Brazil", max_length=120)
    postal_code: str
    phone: str = Field(..., min_length=3, max_length=25)
    website: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    cnpj: str
    organization_date: date
    presbytery: Presbytery = "PANA"
    notes: Optional[str] = None
    photo_url: Optional[str] = Field(None, max_length=255)

    @validator("cnpj")
    def validate_cnpj(cls, value: Optional[str]) -> Optional[str]:
        return normalize_cnpj(value)

    @validator("postal_code")
    def validate_postal_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_postal_code(value)

    @validator("state")
    def validate_state(cls, value: Optional[str]) -> Optional[str]:
        return normalize_state(value)


class ChurchCreate(ChurchBase):
    lead_pastor_id: Optional[int] = Field(None, ge=1)
    assistant_pastor_ids: List[int] = Field(default_factory=list)

    @validator("assistant_pastor_ids")
    def validate_assistant_pastor_ids(cls, value: List[int]) -> List[int]:
        if len(set(value)) != len(value):
            raise ValueError("Duplicate assistant pastor ids detected")
        return value


class ChurchUpdate(BaseModel):
    type: Optional[ChurchTypeValue] = None
    parent_church_id: Optional[int] = Field(None, ge=0)
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    neighborhood: Optional[str] = Field(None, min_length=1, max_length=120)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    state: Optional[str] = None
    country: Optional[str] = Field(None, max_length=120)
    postal_code: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=3, max_length=25)
    website: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    cnpj: Optional[str] = None
    organization_date: Optional[date] = None
    presbytery: Optional[Presbytery] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = Field(None, max_length=255)
    lead_pastor_id: Optional[int] = Field(None, ge=0)
    assistant_pastor_ids: Optional[List[int]] = None

    @validator("cnpj")
    def validate_cnpj(cls, value: Optional[str]) -> Optional[str]:
        return normalize_cnpj(value)

    @validator("postal_code")
    def validate_postal_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_postal_code(value)

    @validator("state")
    def validate_state(cls, value: Optional[str]) -> Optional[str]:
        return normalize_state(value)


class ChurchSummary(BaseModel):
    id: int
    name: str
    type: str
    parent_church_id: Optional[int]

    class Config:
        from_attributes = True


class ChurchOut(ChurchBase):
    id: int
    lead_pastor_id: Optional[int]
    lead_pastor: Optional[PastorSummary] = None
    assistant_pastor_ids: List[int] = Field(default_factory=list)
    congregations_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ChurchListResponse(BaseModel):
    items: List[ChurchOut]
    total: int
    page: int
    page_size: int


class CongregationCountOut(BaseModel):
    church_id: int
    congregations_count: int


class CanDeleteOut(BaseModel):
    church_id: int
    can_delete: bool
    congregations_count: int
