"""
analytics.py — Derived, read-only reporting over service requests
=================================================================
Nothing here touches the store; callers pass in whatever sequence of
requests they are allowed to see (usually the result of list_for).
"""

import csv
import io
from typing import Iterable

from .config import TOP_CATEGORIES
from .errors import ValidationError
from .schema import REQUEST_STATUSES, AnalyticsSummary, CategoryCount, ServiceRequest

CSV_COLUMNS = [
    "id",
    "date",
    "student_id",
    "student_name",
    "service_type",
    "location",
    "status",
    "remarks",
]


def percentage(part: int, total: int) -> float:
    """part/total as a percentage with one decimal; 0.0 for an empty total."""
    if total == 0:
        return 0.0
    return round(part / total * 100, 1)


def aggregate(requests: Iterable[ServiceRequest], top_n: int = TOP_CATEGORIES) -> AnalyticsSummary:
    if top_n < 1:
        raise ValidationError(f"top_n must be at least 1, got {top_n}")
    status_counts = {status: 0 for status in REQUEST_STATUSES}
    category_counts: dict[str, int] = {}
    total = 0

    for request in requests:
        total += 1
        status_counts[request.status] += 1
        category_counts[request.service_type] = category_counts.get(request.service_type, 0) + 1

    # Stable sort keeps first-encountered order among equal counts
    ranked = sorted(category_counts.items(), key=lambda item: item[1], reverse=True)[:top_n]

    return AnalyticsSummary(
        total=total,
        status_counts=status_counts,
        pending=status_counts["Submitted"],
        in_progress=status_counts["In Progress"],
        resolved=status_counts["Resolved"],
        resolution_rate=percentage(status_counts["Resolved"], total),
        top_categories=[
            CategoryCount(service_type=name, count=count, percentage=percentage(count, total))
            for name, count in ranked
        ],
    )


def render_csv_report(requests: Iterable[ServiceRequest]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for request in requests:
        row = request.model_dump(mode="json")
        writer.writerow(["" if row[column] is None else row[column] for column in CSV_COLUMNS])
    return buffer.getvalue()
