"""Status and free-text filtering of reports, newest first."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .models import ANY_STATUS, Report, StatusFilter, parse_status


def matches_query(report: Report, query: str) -> bool:
    """True when query is empty or found (casefolded) in name/description/location."""
    if not query:
        return True
    needle = query.casefold()
    return (
        needle in report.name.casefold()
        or needle in report.description.casefold()
        or needle in report.location.casefold()
    )


def apply_filter(
    items: Iterable[Report],
    status: Optional[StatusFilter] = ANY_STATUS,
    query: str = "",
) -> List[Report]:
    """Return the visible reports for a status constraint and query.

    Sorted by timestamp descending; sorted() is stable so equal timestamps
    keep their input order.
    """
    constraint = parse_status(status)
    retained = [
        report
        for report in items
        if (constraint == ANY_STATUS or report.type == constraint) and matches_query(report, query or "")
    ]
    return sorted(retained, key=lambda report: report.timestamp, reverse=True)
