"""
Exit Scenario Calculations

Projects sale economics at the end of the holding period: sale price,
selling costs, loan payoff, net proceeds, total profit and annualized return.
"""

from typing import Optional
from dataclasses import dataclass

from app.calculations.amortization import calculate_remaining_balance
from app.calculations.models import LoanTerms
from app.calculations.returns import percent_of


@dataclass(frozen=True)
class ExitResult:
    """Sale-side figures for an exit at the end of the hold."""

    projected_sale_price: float
    selling_costs: float
    remaining_loan_balance: float
    net_sale_proceeds: float
    total_profit: float
    total_roi_percent: float
    annualized_return_percent: float


def project_sale_price(
    current_value: float,
    holding_years: int,
    annual_appreciation_percent: float = 0.0,
    known_sale_price: Optional[float] = None,
) -> float:
    """Known sale price if given, else current value compounded annually."""
    if known_sale_price is not None:
        return known_sale_price
    return current_value * (1 + annual_appreciation_percent / 100) ** holding_years


def calculate_selling_costs(sale_price: float, cost_to_sell_percent: float) -> float:
    return sale_price * cost_to_sell_percent / 100


def calculate_net_sale_proceeds(
    sale_price: float, selling_costs: float, remaining_balance: float
) -> float:
    return sale_price - selling_costs - max(0.0, remaining_balance)


def calculate_total_profit(
    net_sale_proceeds: float, total_initial_investment: float, cumulative_cash_flow: float
) -> float:
    return net_sale_proceeds - total_initial_investment + cumulative_cash_flow


def calculate_annualized_return(total_roi_percent: float, holding_years: int) -> float:
    """
    Compound annual return, as a percent, equivalent to a total ROI.

    A zero-year hold returns 0. A loss of the entire investment or more
    is reported as -100.
    """
    if holding_years <= 0:
        return 0.0

    growth = 1 + total_roi_percent / 100
    if growth <= 0:
        return -100.0

    return (growth ** (1 / holding_years) - 1) * 100


def calculate_exit(
    current_value: float,
    holding_years: int,
    loan: LoanTerms,
    total_initial_investment: float,
    cumulative_cash_flow: float,
    cost_to_sell_percent: float = 0.0,
    annual_appreciation_percent: float = 0.0,
    known_sale_price: Optional[float] = None,
) -> ExitResult:
    """
    Calculate the full exit scenario.

    Args:
        current_value: Value that appreciation compounds from
        holding_years: Years held before sale
        loan: Loan terms, used for the payoff balance at sale
        total_initial_investment: Cash invested up front
        cumulative_cash_flow: Sum of escalated annual cash flows over the hold
        cost_to_sell_percent: Selling costs as percent of sale price
        annual_appreciation_percent: Used when no known sale price is given
        known_sale_price: Expected sale price, if known
    """
    sale_price = project_sale_price(
        current_value, holding_years, annual_appreciation_percent, known_sale_price
    )
    selling_costs = calculate_selling_costs(sale_price, cost_to_sell_percent)
    balance = calculate_remaining_balance(
        loan.principal,
        loan.annual_interest_rate_percent,
        loan.term_months,
        holding_years * 12,
    )
    net_proceeds = calculate_net_sale_proceeds(sale_price, selling_costs, balance)
    profit = calculate_total_profit(net_proceeds, total_initial_investment, cumulative_cash_flow)
    total_roi = percent_of(profit, total_initial_investment)

    return ExitResult(
        projected_sale_price=sale_price,
        selling_costs=selling_costs,
        remaining_loan_balance=balance,
        net_sale_proceeds=net_proceeds,
        total_profit=profit,
        total_roi_percent=total_roi,
        annualized_return_percent=calculate_annualized_return(total_roi, holding_years),
    )
