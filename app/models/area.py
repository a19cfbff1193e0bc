"""Area reference model."""
from sqlalchemy import Column, Integer, String

from app.core.database import Base


class Area(Base):
    """Plant area an audit can be recorded against."""
    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
