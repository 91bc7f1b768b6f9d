"""
Return on Equity Analysis

Measures an existing property's return against the equity built up in it
and against the cash originally invested.
"""

from typing import Dict, Optional

from app.calculations import amortization, returns


def calculate_current_debt(
    loan_amount: float,
    annual_rate_percent: float,
    amortization_months: int,
    years_held: float,
) -> float:
    """Loan balance after the given number of years of scheduled payments."""
    return amortization.calculate_remaining_balance(
        loan_amount, annual_rate_percent, amortization_months, int(round(years_held * 12))
    )


def calculate_roe_analysis(
    purchase_price: float,
    down_payment: float,
    out_of_pocket_reno: float,
    current_fmv: float,
    annual_rental_income: float,
    annual_expenses: float,
    current_debt: Optional[float] = None,
    annual_debt_service: Optional[float] = None,
    loan_amount: float = 0.0,
    annual_rate_percent: float = 0.0,
    amortization_months: int = 0,
    years_held: float = 0.0,
    closing_costs: float = 0.0,
) -> Dict:
    """
    Calculate levered and unlevered return on equity.

    Current debt and debt service are taken as given when provided, otherwise
    derived from the original loan terms and the time held.

    Returns:
        Dict with total_initial_investment, current_debt, potential_equity,
        annual_noi, annual_debt_service, unlevered_roe_percent,
        levered_roe_percent, return_on_initial_investment_percent,
        dscr, category and recommendation
    """
    if current_debt is None:
        current_debt = calculate_current_debt(
            loan_amount, annual_rate_percent, amortization_months, years_held
        )

    if annual_debt_service is None:
        payment = amortization.calculate_payment(
            loan_amount, annual_rate_percent, amortization_months
        )
        # Nothing is owed once the loan is paid off
        annual_debt_service = (
            amortization.calculate_annual_debt_service(payment) if current_debt > 0 else 0.0
        )

    total_investment = returns.calculate_total_initial_investment(
        down_payment, closing_costs, out_of_pocket_reno
    )
    noi = returns.calculate_noi(annual_rental_income, annual_expenses)
    value = current_fmv if current_fmv > 0 else purchase_price

    levered_roe = returns.calculate_levered_roe(noi, annual_debt_service, value, current_debt)
    return_on_investment = returns.percent_of(noi - annual_debt_service, total_investment)

    # Without positive equity, judge the property on the cash put in
    basis = levered_roe if value - current_debt > 0 else return_on_investment

    return {
        "total_initial_investment": total_investment,
        "current_debt": current_debt,
        "potential_equity": value - current_debt,
        "annual_noi": noi,
        "annual_debt_service": annual_debt_service,
        "unlevered_roe_percent": returns.calculate_unlevered_roe(noi, value),
        "levered_roe_percent": levered_roe,
        "return_on_initial_investment_percent": return_on_investment,
        "dscr": returns.calculate_dscr(noi, annual_debt_service),
        "category": returns.categorize_return(basis),
        "recommendation": returns.recommend(noi, basis),
    }
