from __future__ import annotations

from abc import ABC, abstractmethod


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_salary(self, *, days_present: int, daily_wage: float) -> float:
        raise NotImplementedError
