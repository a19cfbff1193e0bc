"""
Structured filter and update construction for audit queries.

Filters are expressed as an ordered list of ``Predicate(column, operator, value)``
triples and only rendered into SQL at the last step, always as bound
parameters. Column names are resolved through explicit whitelists so caller
input can never name an arbitrary column.
"""
import logging
import operator
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import InvalidArgumentError
from app.models.audit import Audit

logger = logging.getLogger(__name__)


# Columns a filter may reference, keyed by predicate column name
FILTERABLE_COLUMNS = {
    "area": Audit.area,
    "auditor": Audit.auditor,
    "status": Audit.status,
    "potential": Audit.potential,
    "risk_type": Audit.risk_type,
    "audit_date": Audit.audit_date,
}

OPERATORS = {
    "eq": operator.eq,
    "gte": operator.ge,
    "lte": operator.le,
}

# Columns an update may assign, in the order assignments are emitted
UPDATABLE_COLUMNS = (
    "timestamp",
    "area",
    "auditor",
    "audit_date",
    "risk_type",
    "potential",
    "description",
    "responsible",
    "deadline",
    "status",
    "action_description",
    "photos",
)


@dataclass(frozen=True)
class Predicate:
    """One ``column <operator> value`` condition."""
    column: str
    operator: str
    value: Any


@dataclass
class AuditFilter:
    """Optional constraints accepted by the audit listing."""
    area: Optional[str] = None
    auditor: Optional[str] = None
    status: Optional[str] = None
    potential: Optional[str] = None
    risk_type: Optional[str] = None
    start_date: Optional[date] = None  # inclusive
    end_date: Optional[date] = None  # inclusive

    def to_predicates(self) -> List[Predicate]:
        """
        Build the predicate list for the supplied constraints.

        Empty strings count as absent, matching how query strings arrive from forms.
        An empty result means "no WHERE clause", not "match nothing".
        """
        predicates = []
        for name in ("area", "auditor", "status", "potential", "risk_type"):
            value = getattr(self, name)
            if value:
                predicates.append(Predicate(name, "eq", value))
        if self.start_date:
            predicates.append(Predicate("audit_date", "gte", self.start_date))
        if self.end_date:
            predicates.append(Predicate("audit_date", "lte", self.end_date))
        return predicates


def bound_values(predicates: List[Predicate]) -> List[Any]:
    """Positional parameter list matching the rendered predicates."""
    return [p.value for p in predicates]


def render_where(predicates: List[Predicate]) -> List[ColumnElement]:
    """
    Render predicates into SQLAlchemy clauses to be AND-ed by ``.where(*clauses)``.

    Raises:
        ValueError: If a predicate references an unknown column or operator
    """
    clauses = []
    for predicate in predicates:
        column = FILTERABLE_COLUMNS.get(predicate.column)
        if column is None:
            raise ValueError(f"Unknown filter column: {predicate.column}")
        op = OPERATORS.get(predicate.operator)
        if op is None:
            raise ValueError(f"Unknown filter operator: {predicate.operator}")
        clauses.append(op(column, predicate.value))
    return clauses


@dataclass
class UpdatePlan:
    """Ordered column assignments plus the positional parameters for the UPDATE."""
    audit_id: int
    assignments: List[Tuple[str, Any]] = field(default_factory=list)

    @property
    def params(self) -> List[Any]:
        """Assignment values followed by the target id (bound in the WHERE clause)."""
        return [value for _, value in self.assignments] + [self.audit_id]

    def values(self) -> Dict[str, Any]:
        return dict(self.assignments)


def build_update(audit_id: int, changes: Dict[str, Any]) -> UpdatePlan:
    """
    Turn a partial change set into an UpdatePlan.

    Only keys present in ``changes`` are assigned; an explicit None or "" is a real
    change. Unknown keys are ignored with a warning.

    Raises:
        InvalidArgumentError: If nothing is left to change once ``id`` is removed
    """
    remaining = {k: v for k, v in changes.items() if k != "id"}
    unknown = set(remaining) - set(UPDATABLE_COLUMNS)
    if unknown:
        logger.warning(f"Ignoring non-updatable audit fields: {sorted(unknown)}")

    assignments = [(name, remaining[name]) for name in UPDATABLE_COLUMNS if name in remaining]
    if not assignments:
        raise InvalidArgumentError("no fields to update")

    return UpdatePlan(audit_id=audit_id, assignments=assignments)


def month_key(dialect: str, column):
    """``YYYY-MM`` bucket expression for a date column in the given dialect."""
    if dialect == "postgresql":
        return func.to_char(column, "YYYY-MM")
    if dialect == "sqlite":
        return func.strftime("%Y-%m", column)
    return func.date_format(column, "%Y-%m")


def days_between(dialect: str, later, earlier):
    """Whole-day difference ``later - earlier`` between two date columns."""
    if dialect == "postgresql":
        # date - date is an integer number of days
        return later - earlier
    if dialect == "sqlite":
        return func.julianday(later) - func.julianday(earlier)
    return func.datediff(later, earlier)
