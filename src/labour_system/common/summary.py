"""Counters over grouped query results.

Every known category is reported, with 0 for the ones that did not occur.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from ..core.enums import AttendanceStatus

ATTENDANCE_KEYS = {
    AttendanceStatus.PRESENT.value: "present",
    AttendanceStatus.ABSENT.value: "absent",
    AttendanceStatus.HALF_DAY.value: "halfDay",
}


def status_summary(counts: Mapping[str, int], keys: Mapping[str, str]) -> Dict[str, int]:
    """Map stored status values to output keys, defaulting to 0.

    Unknown statuses in `counts` are ignored so that totalRecords always equals
    the sum of the reported counters.
    """
    result = {out_key: int(counts.get(status, 0)) for status, out_key in keys.items()}
    result["totalRecords"] = sum(result.values())
    return result


def attendance_summary(counts: Mapping[str, int]) -> Dict[str, int]:
    return status_summary(counts, ATTENDANCE_KEYS)


def salary_totals(records: Iterable) -> Dict[str, float]:
    """Totals over salary records (anything with status/total_salary/total_days_present)."""
    totals = {"totalPaid": 0, "totalPending": 0, "recordsCount": 0, "totalDaysPresent": 0}
    for record in records:
        status = getattr(record.status, "value", record.status)
        if status == "paid":
            totals["totalPaid"] += record.total_salary
        elif status == "pending":
            totals["totalPending"] += record.total_salary
        totals["recordsCount"] += 1
        totals["totalDaysPresent"] += record.total_days_present
    return totals
