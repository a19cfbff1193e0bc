"""
Service for audit record operations.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from app.models.audit import Audit, AuditStatus
from app.services.query_builder import AuditFilter, build_update, render_where
from app.utils.photos import normalize_photos

logger = logging.getLogger(__name__)


def page_size(limit: Optional[int] = None) -> int:
    """Requested page size, defaulted when absent and capped at MAX_PAGE_SIZE."""
    return min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)


class AuditService:
    """Service for listing, reading and mutating audits."""

    def __init__(self, db: Session):
        """
        Initialize audit service.

        Args:
            db: Database session
        """
        self.db = db

    def list_audits(
        self,
        filters: AuditFilter,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[Audit], int]:
        """
        Page through audits matching ``filters``, newest submission first.

        The count and the page are built from the same predicate list so the total
        always describes the set the page is drawn from.

        Returns:
            (audits on this page, total matching audits)
        """
        limit = page_size(limit)
        clauses = render_where(filters.to_predicates())

        total = self.db.execute(
            select(func.count()).select_from(Audit).where(*clauses)
        ).scalar_one()

        audits = self.db.execute(
            select(Audit)
            .where(*clauses)
            .order_by(Audit.timestamp.desc(), Audit.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()

        return list(audits), total

    def get_audit(self, audit_id: int) -> Audit:
        """
        Raises:
            ResourceNotFoundError: If no audit has this id
        """
        audit = self.db.get(Audit, audit_id)
        if not audit:
            raise ResourceNotFoundError("audit not found")
        return audit

    def create_audit(self, data: Dict[str, Any]) -> Audit:
        """Insert a new audit from validated request data."""
        values = dict(data)
        if not values.get("timestamp"):
            values["timestamp"] = datetime.now(timezone.utc)
        if not values.get("status"):
            values["status"] = AuditStatus.IN_PROGRESS.value
        values["photos"] = normalize_photos(values.get("photos"))

        audit = Audit(**values)
        self.db.add(audit)
        self.db.commit()
        self.db.refresh(audit)

        logger.info(f"Created audit: id={audit.id}, area={audit.area}, risk_type={audit.risk_type}")
        return audit

    def update_audit(self, audit_id: int, changes: Dict[str, Any]) -> Audit:
        """
        Apply a partial update.

        The change set is validated before any storage access. The write is one
        conditional UPDATE; zero affected rows means the id does not exist.

        Raises:
            InvalidArgumentError: If ``changes`` has nothing to update
            ResourceNotFoundError: If no audit has this id
        """
        if "photos" in changes:
            changes = {**changes, "photos": normalize_photos(changes["photos"])}
        plan = build_update(audit_id, changes)

        try:
            result = self.db.execute(
                update(Audit)
                .where(Audit.id == plan.audit_id)
                .values(**plan.values())
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            # e.g. explicit null on a required column
            self.db.rollback()
            raise InvalidArgumentError(f"invalid update: {e.orig}")
        if result.rowcount == 0:
            self.db.rollback()
            raise ResourceNotFoundError("audit not found")
        self.db.commit()

        logger.info(f"Updated audit: id={audit_id}, fields={[name for name, _ in plan.assignments]}")
        return self.get_audit(audit_id)

    def delete_audit(self, audit_id: int) -> None:
        """
        Raises:
            ResourceNotFoundError: If no audit has this id
        """
        result = self.db.execute(
            delete(Audit)
            .where(Audit.id == audit_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise ResourceNotFoundError("audit not found")
        self.db.commit()

        logger.info(f"Deleted audit: id={audit_id}")
