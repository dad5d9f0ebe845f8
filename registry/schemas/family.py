from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, validator

RelationshipTypeValue = Literal["Father", "Mother", "Spouse", "Sibling", "Child"]


class RelationshipCreate(BaseModel):
    related_member_id: int = Field(..., ge=1)
    relationship_type: RelationshipTypeValue


class RelationshipEdgeIn(BaseModel):
    member_id: int = Field(..., ge=1)
    related_member_id: int = Field(..., ge=1)
    relationship_type: RelationshipTypeValue


class RelationshipImport(BaseModel):
    edges: List[RelationshipEdgeIn] = Field(..., min_length=1)

    @validator("edges")
    def validate_edges(cls, value: List[RelationshipEdgeIn]) -> List[RelationshipEdgeIn]:
        keys = [(edge.member_id, edge.related_member_id, edge.relationship_type) for edge in value]
        if len(set(keys)) != len(keys):
            raise ValueError("Duplicate edges detected")
        return value


class RelationshipOut(BaseModel):
    id: int
    member_id: int
    related_member_id: int
    relationship_type: str

    class Config:
        from_attributes = True


class RelationshipAddResult(BaseModel):
    edge: RelationshipOut
    mirror: Optional[RelationshipOut] = None


class RelatedMemberSummary(BaseModel):
    id: int
    name: str
    sex: str
    membership_number: Optional[str]
    church_id: int
    photo_url: Optional[str]

    class Config:
        from_attributes = True


class FamilyMemberOut(BaseModel):
    relationship_id: int
    relationship_type: str
    member: RelatedMemberSummary

    class Config:
        from_attributes = True
