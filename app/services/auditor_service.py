"""
Service for auditor and area reference data.
"""
import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceConflictError, ResourceNotFoundError, is_unique_violation
from app.models.area import Area
from app.models.auditor import Auditor

logger = logging.getLogger(__name__)

DUPLICATE_AUDITOR_MESSAGE = "auditor with this name already exists"


class AuditorService:
    """
    Auditor CRUD.

    Name uniqueness is left to the database's unique index; the violation is
    recognised from the driver's error code, not its message.
    Audits reference auditors by name only, so deleting or renaming an auditor
    leaves existing audits untouched.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_auditors(self) -> List[Auditor]:
        return list(self.db.execute(select(Auditor).order_by(Auditor.name.asc())).scalars().all())

    def create_auditor(self, name: str) -> Auditor:
        """
        Raises:
            ResourceConflictError: If an auditor with the trimmed name exists
        """
        auditor = Auditor(name=name.strip())
        self.db.add(auditor)
        self._commit_or_conflict()
        self.db.refresh(auditor)

        logger.info(f"Created auditor: id={auditor.id}, name={auditor.name}")
        return auditor

    def rename_auditor(self, auditor_id: int, name: str) -> Auditor:
        """
        Raises:
            ResourceNotFoundError: If no auditor has this id
            ResourceConflictError: If another auditor already uses the name
        """
        auditor = self.db.get(Auditor, auditor_id)
        if not auditor:
            raise ResourceNotFoundError("auditor not found")

        auditor.name = name.strip()
        self._commit_or_conflict()
        self.db.refresh(auditor)

        logger.info(f"Renamed auditor: id={auditor_id}, name={auditor.name}")
        return auditor

    def delete_auditor(self, auditor_id: int) -> None:
        """
        Raises:
            ResourceNotFoundError: If no auditor has this id
        """
        result = self.db.execute(
            delete(Auditor)
            .where(Auditor.id == auditor_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise ResourceNotFoundError("auditor not found")
        self.db.commit()

        logger.info(f"Deleted auditor: id={auditor_id}")

    def _commit_or_conflict(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise ResourceConflictError(DUPLICATE_AUDITOR_MESSAGE)
            raise


def list_areas(db: Session) -> List[Area]:
    """All areas ordered by name."""
    return list(db.execute(select(Area).order_by(Area.name.asc())).scalars().all())


def ensure_areas_seeded(db: Session, names: List[str]) -> int:
    """
    Make sure every name in ``names`` exists as an area.

    Returns:
        Number of areas created
    """
    wanted = {name.strip() for name in names if name and name.strip()}
    if not wanted:
        return 0

    existing = set(db.execute(select(Area.name).where(Area.name.in_(wanted))).scalars().all())
    missing = sorted(wanted - existing)
    for name in missing:
        db.add(Area(name=name))
    db.commit()

    if missing:
        logger.info(f"Seeded {len(missing)} area(s): {', '.join(missing)}")
    return len(missing)
