"""
Cash Flow Calculations

Generates monthly and annual cash flow projections for a rental property.
Rent, other income and each expense category escalate independently,
compounding once per year. The mortgage payment is fixed for the whole hold.
"""

from typing import List, Dict, Mapping, Optional
from dataclasses import replace

from app.calculations.models import ExpenseCategory, PropertyFinancials, YearProjection


def calculate_escalation_factor(annual_rate_percent: float, year: int) -> float:
    """
    Calculate escalation factor for a holding year.

    Args:
        annual_rate_percent: Annual escalation rate as percent
        year: Holding year (1-based); year 1 is unescalated
    """
    return (1 + annual_rate_percent / 100) ** max(0, year - 1)


def escalate(amount: float, annual_rate_percent: float, year: int) -> float:
    """Escalate a year-1 amount to the given holding year."""
    return amount * calculate_escalation_factor(annual_rate_percent, year)


def calculate_effective_income(
    monthly_rent: float, other_monthly_income: float, vacancy_rate_percent: float
) -> float:
    """Gross monthly income less vacancy and collection loss."""
    return (monthly_rent + other_monthly_income) * (1 - vacancy_rate_percent / 100)


def calculate_management_fee(effective_income: float, management_fee_percent: float) -> float:
    """Management fee, charged on collected (not gross) income."""
    return effective_income * management_fee_percent / 100


def calculate_operating_expenses(
    expense_categories: Mapping[str, ExpenseCategory], year: int = 1
) -> float:
    """Monthly equivalent of all operating expense categories for a year."""
    return sum(
        escalate(category.annual_amount, category.annual_escalation_percent, year)
        for category in expense_categories.values()
    ) / 12


def calculate_monthly_cash_flow(
    financials: PropertyFinancials, monthly_mortgage: float, year: int = 1
) -> Dict[str, float]:
    """
    Calculate one month of cash flow for a holding year.

    Returns:
        Dict of monthly figures: gross_income, effective_income,
        management_fee, operating_expenses, noi, debt_service,
        total_expenses and cash_flow
    """
    rent = escalate(financials.monthly_rent, financials.monthly_rent_escalation_percent, year)
    other = escalate(
        financials.other_monthly_income, financials.other_income_escalation_percent, year
    )

    effective_income = calculate_effective_income(rent, other, financials.vacancy_rate_percent)
    mgmt_fee = calculate_management_fee(effective_income, financials.management_fee_percent)
    opex = calculate_operating_expenses(financials.expense_categories, year)

    total_expenses = opex + mgmt_fee + monthly_mortgage

    return {
        "gross_income": rent + other,
        "effective_income": effective_income,
        "management_fee": mgmt_fee,
        "operating_expenses": opex,
        "noi": effective_income - mgmt_fee - opex,
        "debt_service": monthly_mortgage,
        "total_expenses": total_expenses,
        "cash_flow": effective_income - total_expenses,
    }


def project_year(
    financials: PropertyFinancials, monthly_mortgage: float, year: int
) -> YearProjection:
    """Annual totals for one holding year."""
    month = calculate_monthly_cash_flow(financials, monthly_mortgage, year)

    return YearProjection(
        year=year,
        gross_income=month["gross_income"] * 12,
        effective_income=month["effective_income"] * 12,
        management_fee=month["management_fee"] * 12,
        operating_expenses=month["operating_expenses"] * 12,
        noi=month["noi"] * 12,
        debt_service=month["debt_service"] * 12,
        cash_flow=month["cash_flow"] * 12,
    )


def generate_cash_flows(
    financials: PropertyFinancials,
    monthly_mortgage: float,
    holding_years: int,
) -> List[YearProjection]:
    """
    Project annual cash flows over the holding period.

    Each year carries the running cumulative cash flow. Loan balance and
    equity are filled in by the investment calculator, which knows the loan.
    """
    projections = []
    cumulative = 0.0

    for year in range(1, holding_years + 1):
        row = project_year(financials, monthly_mortgage, year)
        cumulative += row.cash_flow
        projections.append(replace(row, cumulative_cash_flow=cumulative))

    return projections


def sum_cash_flows(
    projections: List[YearProjection],
    field: str = "cash_flow",
    start_year: int = 1,
    end_year: Optional[int] = None,
) -> float:
    """Sum a specific field across projected years for a range of years."""
    if end_year is None:
        end_year = len(projections)

    return sum(
        getattr(row, field, 0.0)
        for row in projections
        if start_year <= row.year <= end_year
    )
