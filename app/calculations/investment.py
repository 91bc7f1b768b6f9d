"""
Investment Calculator

Composes amortization, cash flow, return and exit calculations into a single
CalculationResult for an InvestmentScenario.
"""

from dataclasses import replace

from app.calculations import amortization, cashflow, exit_scenario, returns
from app.calculations.models import CalculationResult, InvestmentScenario


def calculate(scenario: InvestmentScenario) -> CalculationResult:
    """
    Run the full financial model for one scenario.

    Pure function: the same scenario always yields an identical result.
    """
    loan = scenario.loan
    financials = scenario.financials
    years = scenario.holding_years

    # === FINANCING ===
    monthly_mortgage = amortization.calculate_payment(
        loan.principal, loan.annual_interest_rate_percent, loan.term_months
    )
    annual_debt_service = amortization.calculate_annual_debt_service(monthly_mortgage)

    # === YEAR 1 OPERATIONS ===
    month = cashflow.calculate_monthly_cash_flow(financials, monthly_mortgage, year=1)
    annual_cash_flow = month["cash_flow"] * 12
    annual_noi = month["noi"] * 12

    total_investment = returns.calculate_total_initial_investment(
        scenario.down_payment_amount, scenario.closing_costs, scenario.renovation_cost
    )

    # === HOLDING PERIOD ===
    projections = cashflow.generate_cash_flows(financials, monthly_mortgage, years)
    cumulative_cash_flow = cashflow.sum_cash_flows(projections)

    exit_assumption = scenario.exit_assumption
    exit_result = exit_scenario.calculate_exit(
        current_value=financials.exit_base_value,
        holding_years=years,
        loan=loan,
        total_initial_investment=total_investment,
        cumulative_cash_flow=cumulative_cash_flow,
        cost_to_sell_percent=scenario.cost_to_sell_percent,
        annual_appreciation_percent=exit_assumption.annual_appreciation_percent,
        known_sale_price=exit_assumption.known_sale_price,
    )

    # === EQUITY ===
    # Levered ROE measures year-1 return against equity at acquisition.
    current_value = financials.exit_base_value
    levered_roe = returns.calculate_levered_roe(
        annual_noi, annual_debt_service, current_value, loan.principal
    )

    return CalculationResult(
        monthly_mortgage_payment=monthly_mortgage,
        effective_monthly_income=month["effective_income"],
        total_monthly_expenses=month["total_expenses"],
        monthly_cash_flow=month["cash_flow"],
        annual_cash_flow=annual_cash_flow,
        total_initial_investment=total_investment,
        cap_rate_percent=returns.calculate_cap_rate(annual_noi, financials.property_value),
        cash_on_cash_return_percent=returns.calculate_cash_on_cash(
            annual_cash_flow, total_investment
        ),
        projected_sale_price=exit_result.projected_sale_price,
        total_profit=exit_result.total_profit,
        total_roi_percent=exit_result.total_roi_percent,
        annualized_return_percent=exit_result.annualized_return_percent,
        loan_amount=loan.principal,
        annual_noi=annual_noi,
        annual_debt_service=annual_debt_service,
        dscr=returns.calculate_dscr(annual_noi, annual_debt_service),
        unlevered_roe_percent=returns.calculate_unlevered_roe(
            annual_noi, financials.property_value
        ),
        levered_roe_percent=levered_roe,
        remaining_loan_balance=exit_result.remaining_loan_balance,
        selling_costs=exit_result.selling_costs,
        net_sale_proceeds=exit_result.net_sale_proceeds,
        cumulative_cash_flow=cumulative_cash_flow,
        category=returns.categorize_return(exit_result.total_roi_percent),
        recommendation=returns.recommend(annual_noi, exit_result.total_roi_percent),
        yearly_projections=tuple(_with_equity(scenario, projections)),
    )


def _with_equity(scenario: InvestmentScenario, projections):
    """Attach year-end loan balance, appreciated value and equity to each year."""
    loan = scenario.loan
    assumption = scenario.exit_assumption
    base_value = scenario.financials.exit_base_value

    for row in projections:
        balance = amortization.calculate_remaining_balance(
            loan.principal, loan.annual_interest_rate_percent, loan.term_months, row.year * 12
        )
        value = exit_scenario.project_sale_price(
            base_value, row.year, assumption.annual_appreciation_percent
        )
        # A known sale price applies only at the exit year
        if assumption.known_sale_price is not None and row.year == scenario.holding_years:
            value = assumption.known_sale_price

        yield replace(row, loan_balance=balance, property_value=value, equity=value - balance)
