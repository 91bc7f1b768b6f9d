"""
Loan Amortization Calculations

Implements fixed-rate loan payment, remaining balance and amortization
schedule calculations. Rates are annual percents (e.g., 6.0 for 6%).
"""

from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percent rate to a monthly decimal rate."""
    return annual_rate_percent / 12 / 100


def calculate_payment(
    principal: float, annual_rate_percent: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percent (e.g., 6 for 6%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (0 for a cash purchase)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    rate = monthly_rate(annual_rate_percent)

    if rate == 0:
        return principal / amortization_months

    growth = (1 + rate) ** amortization_months
    return principal * rate * growth / (growth - 1)


def calculate_remaining_balance(
    principal: float,
    annual_rate_percent: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments, floored at 0."""
    if principal <= 0 or amortization_months <= 0:
        return 0.0
    if payments_completed <= 0:
        return principal
    if payments_completed >= amortization_months:
        return 0.0

    rate = monthly_rate(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, amortization_months)

    if rate == 0:
        return max(0.0, principal - payment * payments_completed)

    growth = (1 + rate) ** payments_completed
    balance = principal * growth - payment * ((growth - 1) / rate)

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    amortization_months: int,
    total_months: Optional[int] = None,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a month-by-month amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percent
        amortization_months: Amortization period in months
        total_months: Number of rows to produce (defaults to the full term)
        start_date: Date of first payment (defaults to today)

    Returns:
        List of amortization rows
    """
    schedule = []
    if principal <= 0 or amortization_months <= 0:
        return schedule

    if total_months is None:
        total_months = amortization_months
    if start_date is None:
        start_date = date.today()

    rate = monthly_rate(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, amortization_months)
    balance = principal

    for period in range(1, total_months + 1):
        interest = balance * rate
        principal_pmt = min(payment - interest, balance)

        # Final period absorbs floating-point residue
        if period == amortization_months:
            principal_pmt = balance

        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": (start_date + relativedelta(months=period - 1)).isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(principal_pmt + interest, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0.0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

        if balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over a schedule."""
    return sum(row["interest"] for row in schedule)


def calculate_annual_debt_service(monthly_payment: float) -> float:
    """Annual debt service for a fixed monthly payment."""
    return monthly_payment * 12


def calculate_loan_constant(
    principal: float, annual_rate_percent: float, amortization_years: int
) -> float:
    """Calculate loan constant (annual debt service / loan amount) as a percent."""
    if principal <= 0:
        return 0.0
    payment = calculate_payment(principal, annual_rate_percent, amortization_years * 12)
    return calculate_annual_debt_service(payment) / principal * 100
