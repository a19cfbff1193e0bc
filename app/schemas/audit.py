"""Schemas for safety audit records, statistics and import."""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.audit import AuditStatus
from app.utils.photos import normalize_photos


class AuditCreateRequest(BaseModel):
    """Request schema for recording a new audit."""
    timestamp: Optional[datetime] = Field(None, description="Submission time (defaults to now)")
    area: str = Field(..., max_length=255)
    auditor: str = Field(..., max_length=255)
    audit_date: date
    risk_type: str = Field(..., max_length=255)
    potential: str = Field(..., max_length=50, description="No Deviation, Low, Medium or High")
    description: str
    responsible: str = Field("", max_length=255)
    deadline: Optional[date] = None
    status: str = Field(AuditStatus.IN_PROGRESS.value, max_length=50, description="In Progress or Resolved")
    action_description: str
    photos: Optional[str] = Field(None, description="Comma-joined photo URLs")

    @field_validator("photos", mode="before")
    @classmethod
    def validate_photos(cls, v):
        """Accept a list or a comma-joined string; store trimmed, empty as None."""
        return normalize_photos(v)


class AuditUpdateRequest(BaseModel):
    """
    Request schema for a partial audit update.

    Only fields present in the body are changed (read with ``exclude_unset``);
    an explicit null or empty string is a change, not an omission.
    """
    timestamp: Optional[datetime] = None
    area: Optional[str] = Field(None, max_length=255)
    auditor: Optional[str] = Field(None, max_length=255)
    audit_date: Optional[date] = None
    risk_type: Optional[str] = Field(None, max_length=255)
    potential: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    responsible: Optional[str] = Field(None, max_length=255)
    deadline: Optional[date] = None
    status: Optional[str] = Field(None, max_length=50)
    action_description: Optional[str] = None
    photos: Optional[str] = None

    @field_validator("photos", mode="before")
    @classmethod
    def validate_photos(cls, v):
        return normalize_photos(v)


class AuditResponse(BaseModel):
    """Response schema for an audit record."""
    id: int
    timestamp: Optional[datetime] = None
    area: str
    auditor: str
    audit_date: Optional[date] = None
    risk_type: str
    potential: str
    description: str
    responsible: str
    deadline: Optional[date] = None
    status: str
    action_description: str
    photos: Optional[str] = None
    photo_urls: List[str] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditListResponse(BaseModel):
    """Response schema for a page of audits."""
    items: List[AuditResponse]
    total: int
    limit: int
    offset: int


class AuditOptionsResponse(BaseModel):
    """Conventional values for the audit form selection lists."""
    potentials: List[str]
    statuses: List[str]
    risk_types: List[str]


class AuditStatsResponse(BaseModel):
    """Snapshot statistics over all audits."""
    total_audits: int
    resolved_audits: int
    pending_audits: int
    by_potential: Dict[str, int]
    by_area: Dict[str, int]
    by_risk_type: Dict[str, int]
    by_status: Dict[str, int]


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    total: int
    resolved: int
    pending: int


class AreaPerformance(BaseModel):
    area: str
    total: int
    resolved: int
    resolution_rate: float  # percent, 0-100
    avg_resolution_days: int


class RiskDistributionItem(BaseModel):
    risk_type: str
    count: int
    percentage: float  # percent of total_risks, 0-100


class AuditTrendsResponse(BaseModel):
    """Trend summaries over the audit table."""
    monthly_trends: List[MonthlyTrend]
    area_performance: List[AreaPerformance]
    risk_distribution: List[RiskDistributionItem]
    total_risks: int


class ImportAuditRow(BaseModel):
    """
    One row of bulk import data, all values as raw text.

    Cells are coerced rather than validated: null becomes "" and numbers become
    their text, so a bad cell is reported against its row instead of failing
    the whole request.
    """
    timestamp: Optional[str] = ""
    area: Optional[str] = ""
    auditor: Optional[str] = ""
    date: Optional[str] = ""
    risk_type: Optional[str] = ""
    potential: Optional[str] = ""
    description: Optional[str] = ""
    responsible: Optional[str] = ""
    deadline: Optional[str] = ""
    status: Optional[str] = ""
    action_description: Optional[str] = ""
    photos: Optional[str] = None

    @field_validator(
        "timestamp", "area", "auditor", "date", "risk_type", "potential", "description",
        "responsible", "deadline", "status", "action_description",
        mode="before",
    )
    @classmethod
    def coerce_cell(cls, v):
        if v is None:
            return ""
        if isinstance(v, str):
            return v
        return str(v)

    @field_validator("photos", mode="before")
    @classmethod
    def coerce_photos(cls, v):
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, list):
            return ",".join(str(url) for url in v if url is not None)
        return str(v)


class ImportAuditsRequest(BaseModel):
    """Request schema for JSON bulk import."""
    audits: List[ImportAuditRow]


class ImportAuditsResponse(BaseModel):
    """Partial-success summary of a bulk import."""
    imported: int
    errors: List[str]


class UploadUrlRequest(BaseModel):
    """Request schema for a photo upload URL."""
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field("image/jpeg", max_length=100)


class UploadUrlResponse(BaseModel):
    """Presigned upload URL plus the public URL the photo will be readable at."""
    upload_url: str
    file_url: str
    object_name: str
