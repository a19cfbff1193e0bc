"""
Bulk import of audits from spreadsheet exports.

Rows are inserted one at a time, each in its own transaction, so a failing row is
skipped and reported while every earlier row stays committed.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.audit import Audit
from app.schemas.audit import ImportAuditRow
from app.utils.photos import normalize_photos

logger = logging.getLogger(__name__)

# Column order of the tab-separated export; the header line is not consulted
TSV_COLUMNS = (
    "timestamp",
    "area",
    "auditor",
    "date",
    "risk_type",
    "potential",
    "description",
    "responsible",
    "deadline",
    "status",
    "action_description",
    "photos",
)

REQUIRED_FIELDS = ("area", "auditor", "risk_type", "description", "action_description")

# Formats tried after ISO 8601; spreadsheet exports are usually day-first
DATETIME_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
)


def parse_datetime(value: str) -> Optional[datetime]:
    """Parse a spreadsheet date/time cell; None when empty or unparseable."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_date(value: str) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def parse_tsv(text: str) -> List[ImportAuditRow]:
    """
    Parse tab-separated export text into import rows.

    The first line is a header and skipped. Columns are read by position;
    missing trailing columns become empty strings and blank lines are ignored.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").strip("\n").split("\n")
    rows = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = line.split("\t")
        cells = {
            name: (values[index].strip() if index < len(values) else "")
            for index, name in enumerate(TSV_COLUMNS)
        }
        rows.append(ImportAuditRow(**cells))
    return rows


@dataclass
class ImportResult:
    """Outcome of a bulk import: how many rows went in, and why the others did not."""
    imported: int = 0
    errors: List[str] = field(default_factory=list)


class ImportService:
    """Sequential, partial-failure bulk import."""

    def __init__(self, db: Session):
        self.db = db

    def import_rows(self, rows: List[ImportAuditRow]) -> ImportResult:
        """
        Insert each row in order.

        Row numbers in error messages are 1-based over the data rows.
        """
        result = ImportResult()

        for index, row in enumerate(rows, start=1):
            if any(not getattr(row, name).strip() for name in REQUIRED_FIELDS):
                result.errors.append(f"Row {index}: Missing required fields")
                continue

            audit = self._to_audit(index, row)
            try:
                self.db.add(audit)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.warning(f"Import row {index} failed: {e}")
                result.errors.append(f"Row {index}: {getattr(e, 'orig', None) or e}")
                continue

            result.imported += 1

        logger.info(f"Imported {result.imported} of {len(rows)} audit rows ({len(result.errors)} errors)")
        return result

    def _to_audit(self, index: int, row: ImportAuditRow) -> Audit:
        timestamp = parse_datetime(row.timestamp)
        audit_date = parse_date(row.date)
        deadline = parse_date(row.deadline)
        for name, raw, parsed in (
            ("timestamp", row.timestamp, timestamp),
            ("date", row.date, audit_date),
            ("deadline", row.deadline, deadline),
        ):
            if raw.strip() and parsed is None:
                logger.warning(f"Import row {index}: could not parse {name} {raw!r}, storing NULL")

        return Audit(
            timestamp=timestamp,
            area=row.area.strip(),
            auditor=row.auditor.strip(),
            audit_date=audit_date,
            risk_type=row.risk_type.strip(),
            potential=row.potential.strip(),
            description=row.description,
            responsible=row.responsible.strip(),
            deadline=deadline,
            status=row.status.strip(),
            action_description=row.action_description,
            photos=normalize_photos(row.photos),
        )
