"""Auditor reference model."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class Auditor(Base):
    """Named auditor used to populate selection lists."""
    __tablename__ = "auditors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)  # Trimmed before write
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
