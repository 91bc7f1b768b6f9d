"""
Return Metrics

Cap rate, cash-on-cash, return on equity and coverage ratios, plus the
categorization and hold/sell recommendation rules. All percentages are
returned as percents (7.2 means 7.2%). Every division is guarded: a zero
denominator yields 0 rather than NaN or infinity.
"""

# Ordered tiers, first match wins; boundaries belong to the higher tier.
CATEGORY_TIERS = [
    (15.0, "excellent"),
    (10.0, "good"),
    (5.0, "moderate"),
    (0.0, "fair"),
]
POOR = "poor"

IMPROVE_BELOW_PERCENT = 5.0


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def percent_of(numerator: float, denominator: float) -> float:
    return safe_divide(numerator, denominator) * 100


def calculate_total_initial_investment(
    down_payment: float, closing_costs: float, renovation_cost: float = 0.0
) -> float:
    """Cash invested up front: down payment + closing costs + renovation."""
    return down_payment + closing_costs + renovation_cost


def calculate_noi(annual_income: float, annual_operating_expenses: float) -> float:
    """Net operating income; excludes debt service."""
    return annual_income - annual_operating_expenses


def calculate_cap_rate(annual_noi: float, property_value: float) -> float:
    return percent_of(annual_noi, property_value)


def calculate_cash_on_cash(annual_cash_flow: float, total_initial_investment: float) -> float:
    return percent_of(annual_cash_flow, total_initial_investment)


def calculate_unlevered_roe(annual_noi: float, property_value: float) -> float:
    """NOI over purchase price or current FMV, with no debt on either side."""
    return percent_of(annual_noi, property_value)


def calculate_levered_roe(
    annual_noi: float, annual_debt_service: float, current_value: float, current_debt: float
) -> float:
    """
    NOI after debt service over equity (current value less current debt).

    Divides by the size of the equity so the sign follows the return: an
    underwater property losing money reports a negative ROE.
    """
    return percent_of(annual_noi - annual_debt_service, abs(current_value - current_debt))


def calculate_dscr(annual_noi: float, annual_debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Returns 0 when there is no debt service.
    """
    return safe_divide(annual_noi, annual_debt_service)


def categorize_return(return_percent: float) -> str:
    """
    Map a return percent to a category.

    >= 15 excellent, >= 10 good, >= 5 moderate, >= 0 fair, otherwise poor.
    """
    for threshold, category in CATEGORY_TIERS:
        if return_percent >= threshold:
            return category
    return POOR


def recommend(annual_noi: float, return_percent: float) -> str:
    """Hold/sell recommendation: sell on negative NOI or return, improve below 5%."""
    if annual_noi < 0 or return_percent < 0:
        return "sell"
    if return_percent < IMPROVE_BELOW_PERCENT:
        return "improve"
    return "hold"
