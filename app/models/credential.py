"""Shared password model."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.core.database import Base

# The table only ever holds the row with this primary key
CREDENTIAL_ROW_ID = 1


class Credential(Base):
    """Single shared password, stored as a salted digest."""
    __tablename__ = "credentials"

    id = Column(Integer, primary_key=True, autoincrement=False)
    value = Column(String(255), nullable=False)  # Hex digest, never the raw password
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
