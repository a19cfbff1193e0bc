"""
Tests for filter predicate and update plan construction.
"""
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from app.core.exceptions import InvalidArgumentError
from app.models.audit import Audit
from app.services.query_builder import (
    AuditFilter,
    Predicate,
    UPDATABLE_COLUMNS,
    bound_values,
    build_update,
    render_where,
)


def test_empty_filter_has_no_predicates():
    """No constraints means no WHERE clause at all."""
    predicates = AuditFilter().to_predicates()

    assert predicates == []
    assert bound_values(predicates) == []
    assert render_where(predicates) == []


def test_empty_strings_are_treated_as_absent():
    assert AuditFilter(area="", status="").to_predicates() == []


def test_filter_predicates_in_order_with_matching_values():
    filters = AuditFilter(
        area="Warehouse",
        auditor="Alex Doe",
        status="Resolved",
        potential="High",
        risk_type="Fall Hazard",
        start_date=date(2026, 1, 1),
        end_date=date(2026, 3, 31),
    )
    predicates = filters.to_predicates()

    assert predicates == [
        Predicate("area", "eq", "Warehouse"),
        Predicate("auditor", "eq", "Alex Doe"),
        Predicate("status", "eq", "Resolved"),
        Predicate("potential", "eq", "High"),
        Predicate("risk_type", "eq", "Fall Hazard"),
        Predicate("audit_date", "gte", date(2026, 1, 1)),
        Predicate("audit_date", "lte", date(2026, 3, 31)),
    ]
    assert bound_values(predicates) == [
        "Warehouse", "Alex Doe", "Resolved", "High", "Fall Hazard",
        date(2026, 1, 1), date(2026, 3, 31),
    ]


def test_rendered_where_uses_bound_parameters():
    """Caller values never end up inline in the SQL text."""
    predicates = AuditFilter(area="x' OR '1'='1", start_date=date(2026, 1, 1)).to_predicates()
    statement = select(Audit.id).where(*render_where(predicates))
    compiled = statement.compile(dialect=postgresql.dialect())

    sql = str(compiled)
    assert "x' OR" not in sql
    assert "audits.area = %(area_1)s" in sql
    assert "audits.audit_date >= %(audit_date_1)s" in sql
    assert list(compiled.params.values()) == bound_values(predicates)


def test_render_rejects_unknown_column_and_operator():
    with pytest.raises(ValueError):
        render_where([Predicate("description; DROP TABLE audits", "eq", "x")])
    with pytest.raises(ValueError):
        render_where([Predicate("area", "like", "x")])


def test_build_update_only_assigns_present_fields():
    plan = build_update(7, {"status": "Resolved", "responsible": ""})

    assert plan.assignments == [("responsible", ""), ("status", "Resolved")]
    assert plan.values() == {"responsible": "", "status": "Resolved"}


def test_build_update_id_is_last_param():
    plan = build_update(42, {"area": "Yard", "photos": None})

    assert plan.params == ["Yard", None, 42]


def test_build_update_keeps_column_order_regardless_of_input_order():
    changes = {name: f"v-{name}" for name in reversed(UPDATABLE_COLUMNS)}
    plan = build_update(1, changes)

    assert [name for name, _ in plan.assignments] == list(UPDATABLE_COLUMNS)


@pytest.mark.parametrize("changes", [{}, {"id": 3}, {"created_at": "2026-01-01"}])
def test_build_update_with_nothing_to_change_is_invalid(changes):
    with pytest.raises(InvalidArgumentError) as exc_info:
        build_update(3, changes)

    assert exc_info.value.message == "no fields to update"
