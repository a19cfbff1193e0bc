"""
Reshaping of grouped-count rows into statistics and trend summaries.

Functions here take plain row tuples as returned by the stats queries and never
touch the database, so every division guard and rounding rule can be checked in
isolation.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0.0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return (part / whole) * 100


def counts_by_key(rows: Iterable[Tuple[Any, int]]) -> Dict[str, int]:
    """
    Reshape ``(key, count)`` rows into a mapping.

    Keys are whatever values are in the data: no enumeration check and no
    zero-filling. A NULL key is reported under "".
    """
    result = {}
    for key, count in rows:
        key = "" if key is None else str(key)
        result[key] = result.get(key, 0) + int(count or 0)
    return result


def snapshot(
    total: int,
    resolved: int,
    by_potential: Dict[str, int],
    by_area: Dict[str, int],
    by_risk_type: Dict[str, int],
    by_status: Dict[str, int],
) -> Dict[str, Any]:
    """Assemble snapshot stats; pending is derived so resolved + pending == total."""
    total = int(total or 0)
    resolved = int(resolved or 0)
    return {
        "total_audits": total,
        "resolved_audits": resolved,
        "pending_audits": total - resolved,
        "by_potential": by_potential,
        "by_area": by_area,
        "by_risk_type": by_risk_type,
        "by_status": by_status,
    }


def monthly_trends(rows: Iterable[Tuple[str, int, int]]) -> List[Dict[str, Any]]:
    """``(month, total, resolved)`` rows -> ascending monthly totals with pending counts."""
    trends = []
    for month, total, resolved in rows:
        if month is None:
            continue
        total = int(total or 0)
        resolved = int(resolved or 0)
        trends.append({
            "month": str(month),
            "total": total,
            "resolved": resolved,
            "pending": total - resolved,
        })
    trends.sort(key=lambda item: item["month"])
    return trends


def area_performance(rows: Iterable[Tuple[str, int, int, Optional[float]]]) -> List[Dict[str, Any]]:
    """
    ``(area, total, resolved, avg_resolution_days)`` rows -> per-area performance.

    ``avg_resolution_days`` is the raw average over resolved audits (None when an area
    has none) and is rounded half-up to whole days here.
    """
    performance = []
    for area, total, resolved, avg_days in rows:
        total = int(total or 0)
        resolved = int(resolved or 0)
        performance.append({
            "area": "" if area is None else str(area),
            "total": total,
            "resolved": resolved,
            "resolution_rate": percentage(resolved, total),
            "avg_resolution_days": round_half_up(float(avg_days)) if avg_days is not None else 0,
        })
    performance.sort(key=lambda item: (-item["total"], item["area"]))
    return performance


def risk_distribution(rows: Sequence[Tuple[str, int]]) -> Tuple[List[Dict[str, Any]], int]:
    """
    ``(risk_type, count)`` rows -> distribution entries and the grand total.

    Percentages are of the grand total across all risk types, all 0 when it is 0.
    """
    rows = [("" if key is None else str(key), int(count or 0)) for key, count in rows]
    total_risks = sum(count for _, count in rows)
    distribution = [
        {
            "risk_type": risk_type,
            "count": count,
            "percentage": percentage(count, total_risks),
        }
        for risk_type, count in rows
    ]
    distribution.sort(key=lambda item: (-item["count"], item["risk_type"]))
    return distribution, total_risks
