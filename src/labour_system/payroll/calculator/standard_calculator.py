from __future__ import annotations

from .base import SalaryCalculator


class DailyWageCalculator(SalaryCalculator):
    """Standard rule: days present x daily wage."""

    def total_salary(self, *, days_present: int, daily_wage: float) -> float:
        return max(days_present, 0) * daily_wage
