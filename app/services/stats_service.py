"""
Service for audit statistics and trends.
"""
import calendar
import logging
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.core.database import dialect_name
from app.models.audit import Audit, AuditStatus
from app.services import aggregation
from app.services.query_builder import days_between, month_key

logger = logging.getLogger(__name__)

TREND_WINDOW_MONTHS = 12


def months_before(day: date, months: int) -> date:
    """Same calendar day ``months`` earlier, clamped to the end of shorter months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class StatsService:
    """Grouped-count queries over the whole audit table."""

    def __init__(self, db: Session):
        """
        Initialize stats service.

        Args:
            db: Database session
        """
        self.db = db
        self.dialect = dialect_name(db)

    def _resolved_count(self):
        return func.count(case((Audit.status == AuditStatus.RESOLVED.value, 1)))

    def _group_counts(self, column) -> Dict[str, int]:
        rows = self.db.execute(
            select(column, func.count()).group_by(column).order_by(func.count().desc())
        ).all()
        return aggregation.counts_by_key(rows)

    def get_stats(self) -> Dict[str, Any]:
        """
        Snapshot statistics: totals plus counts by potential, area, risk type and status.

        Any status other than exactly "Resolved" counts as pending.
        """
        total, resolved = self.db.execute(
            select(func.count(), self._resolved_count()).select_from(Audit)
        ).one()

        stats = aggregation.snapshot(
            total=total,
            resolved=resolved,
            by_potential=self._group_counts(Audit.potential),
            by_area=self._group_counts(Audit.area),
            by_risk_type=self._group_counts(Audit.risk_type),
            by_status=self._group_counts(Audit.status),
        )
        logger.info(
            f"Generated audit stats: total={stats['total_audits']}, "
            f"resolved={stats['resolved_audits']}, pending={stats['pending_audits']}"
        )
        return stats

    def get_trends(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Trend summaries.

        Args:
            today: Reference day for the trailing 12-month window (defaults to today)

        Returns:
            Dictionary with monthly_trends, area_performance, risk_distribution, total_risks
        """
        today = today or date.today()
        window_start = months_before(today, TREND_WINDOW_MONTHS)

        month = month_key(self.dialect, Audit.audit_date).label("month")
        monthly_rows = self.db.execute(
            select(month, func.count(), self._resolved_count())
            .where(Audit.audit_date >= window_start)
            .group_by(month)
            .order_by(month)
        ).all()

        resolution_days = days_between(self.dialect, Audit.deadline, Audit.audit_date)
        area_rows = self.db.execute(
            select(
                Audit.area,
                func.count(),
                self._resolved_count(),
                func.avg(case((Audit.status == AuditStatus.RESOLVED.value, resolution_days))),
            )
            .group_by(Audit.area)
            .order_by(func.count().desc())
        ).all()

        risk_rows = self.db.execute(
            select(Audit.risk_type, func.count())
            .group_by(Audit.risk_type)
            .order_by(func.count().desc())
        ).all()
        distribution, total_risks = aggregation.risk_distribution(risk_rows)

        logger.info(
            f"Generated audit trends since {window_start.isoformat()}: "
            f"{len(monthly_rows)} months, {len(area_rows)} areas, {total_risks} risks"
        )
        return {
            "monthly_trends": aggregation.monthly_trends(monthly_rows),
            "area_performance": aggregation.area_performance(area_rows),
            "risk_distribution": distribution,
            "total_risks": total_risks,
        }
