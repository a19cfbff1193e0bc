"""Audit (hazard observation) database model."""
import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime
from sqlalchemy.sql import func

from app.core.database import Base
from app.utils.photos import split_photos


class RiskPotential(str, enum.Enum):
    """Conventional potential severity values, lowest to highest."""
    NO_DEVIATION = "No Deviation"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AuditStatus(str, enum.Enum):
    """Conventional remediation status values."""
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


RISK_TYPES = [
    "Deficient Isolation",
    "Uneven Floor",
    "Unguarded Equipment",
    "Missing PPE",
    "Unsigned Area",
    "Fluid Leak",
    "Exposed Wiring",
    "Damaged Structure",
    "Inadequate Access",
    "Poor Lighting",
    "Inadequate Ventilation",
    "Improperly Stored Material",
    "Defective Tool",
    "Inadequate Procedure",
    "Lack of Training",
    "Work Overload",
    "Poor Ergonomics",
    "Excessive Noise",
    "Inadequate Temperature",
    "Chemical Contamination",
    "Fall Hazard",
    "Cut Hazard",
    "Burn Hazard",
    "Electrical Hazard",
    "Explosion Hazard",
    "Documentation",
    "Other",
]


class Audit(Base):
    """
    A single safety audit record.

    Enumerated fields (potential, status, risk_type) are stored as free text; values
    outside the conventional lists are kept as-is and reported as their own bucket.
    """
    __tablename__ = "audits"

    id = Column(Integer, primary_key=True, index=True)

    # Observation
    timestamp = Column(DateTime(timezone=True), nullable=True, index=True)  # Submission time
    area = Column(String(255), nullable=False, index=True)
    auditor = Column(String(255), nullable=False, index=True)  # Auditor name, by value
    audit_date = Column(Date, nullable=True, index=True)
    risk_type = Column(String(255), nullable=False, index=True)
    potential = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Remediation
    responsible = Column(String(255), nullable=False, default="")
    deadline = Column(Date, nullable=True)
    status = Column(String(50), nullable=False, default=AuditStatus.IN_PROGRESS.value, index=True)
    action_description = Column(Text, nullable=False)

    photos = Column(Text, nullable=True)  # Comma-joined photo URLs

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def photo_urls(self):
        """Photo URLs as a list, empty entries dropped."""
        return split_photos(self.photos)

    @property
    def is_resolved(self) -> bool:
        return self.status == AuditStatus.RESOLVED.value
