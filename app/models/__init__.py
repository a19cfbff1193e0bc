"""Database models."""
from app.models.audit import Audit
from app.models.auditor import Auditor
from app.models.area import Area
from app.models.credential import Credential

__all__ = [
    "Audit",
    "Auditor",
    "Area",
    "Credential",
]
