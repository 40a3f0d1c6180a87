from labour_system.payroll.calculator.standard_calculator import DailyWageCalculator


def test_daily_wage_calculator_multiplies_days_by_wage():
    calc = DailyWageCalculator()
    assert calc.total_salary(days_present=3, daily_wage=100) == 300
    assert calc.total_salary(days_present=0, daily_wage=450.5) == 0
