"""Schemas for auditors and areas."""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


class AuditorRequest(BaseModel):
    """Request schema for creating or renaming an auditor."""
    name: str = Field(..., max_length=255, description="Auditor name (trimmed)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class AuditorResponse(BaseModel):
    """Response schema for an auditor."""
    id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditorListResponse(BaseModel):
    items: List[AuditorResponse]
    total: int


class AreaResponse(BaseModel):
    """Response schema for an area."""
    id: int
    name: str

    model_config = {"from_attributes": True}


class AreaListResponse(BaseModel):
    items: List[AreaResponse]
    total: int
