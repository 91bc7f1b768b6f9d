"""
Property ROI Review

Scores each property in a portfolio on appreciation, yield and operating cost
ratios, and flags concerns and suggestions from fixed rules of thumb.
"""

import logging
from typing import Any, Dict, List, Mapping

from app.calculations import returns
from app.calculations.inputs import pick_number

logger = logging.getLogger(__name__)

DEFAULT_VACANCY_RATE_PERCENT = 5.0
DEFAULT_APPRECIATION_POTENTIAL_PERCENT = 3.2

# Row keys: camelCase field name first, then the spreadsheet column label
FIELD_KEYS = {
    "purchase_price": ("purchasePrice", "Purchase Price"),
    "current_market_value": ("currentMarketValue", "Current Market Value"),
    "annual_rental_income": ("annualRentalIncome", "Annual Rental Income"),
    "annual_expenses": ("annualExpenses", "Annual Expenses"),
    "insurance_cost": ("insuranceCost", "Insurance Cost"),
    "interest_rate": ("interestRate", "Interest Rate"),
    "labour_cost": ("labourCost", "Labour Cost"),
    "other_costs": ("otherCosts", "Other Costs"),
    "maintenance": ("maintenance", "Maintenance"),
    "vacancy_rate": ("vacancyRate", "Vacancy Rate"),
    "property_taxes": ("propertyTaxes", "Property Taxes"),
    "property_manager_fee": ("propertyManagerFee", "Property Manager Fee"),
}


def _first_text(row: Mapping[str, Any], keys, default: str) -> str:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return str(value)
    return default


def find_concerns(data: Dict[str, float]) -> List[str]:
    """Operating ratios that are dragging the property's returns."""
    income = data["annual_rental_income"]
    concerns = []

    if data["insurance_cost"] > income * 0.10:
        concerns.append("Insurance costs are higher than 10% of annual rental income")
    if data["vacancy_rate"] > 8:
        concerns.append("Vacancy rate is significantly above market average")
    if data["maintenance"] > income * 0.15:
        concerns.append("Maintenance costs are higher than 15% of annual rental income")
    if data["interest_rate"] > 6:
        concerns.append("Interest rate is on the higher side, consider refinancing")
    if data["property_taxes"] > income * 0.12:
        concerns.append("Property taxes are significantly impacting returns")

    return concerns


def find_suggestions(data: Dict[str, float]) -> List[str]:
    income = data["annual_rental_income"]
    suggestions = []

    if data["interest_rate"] > 5:
        suggestions.append("Consider refinancing to take advantage of lower interest rates")
    if data["vacancy_rate"] > 5:
        suggestions.append("Implement better tenant retention strategies to reduce vacancy rate")
    if data["property_manager_fee"] > income * 0.10:
        suggestions.append("Evaluate property management fees to ensure they're competitive")
    if income < data["purchase_price"] * 0.08:
        suggestions.append("Consider rent increases to align with market rates")

    return suggestions


def review_property(
    row: Mapping[str, Any],
    index: int = 0,
    default_vacancy_rate: float = DEFAULT_VACANCY_RATE_PERCENT,
    appreciation_potential: float = DEFAULT_APPRECIATION_POTENTIAL_PERCENT,
) -> Dict:
    """
    Review a single property row.

    Args:
        row: Raw property values keyed by field name or column label
        index: Zero-based position in the portfolio, used for the property id
        default_vacancy_rate: Vacancy percent used when the row has none
        appreciation_potential: Market appreciation estimate reported back

    Returns:
        Dict with the property's figures, ROI category, recommendation,
        analysis ratios, concerns and suggestions
    """
    data = {
        name: pick_number(row, keys, default_vacancy_rate if name == "vacancy_rate" else 0.0)
        for name, keys in FIELD_KEYS.items()
    }

    purchase_price = data["purchase_price"]
    noi = returns.calculate_noi(data["annual_rental_income"], data["annual_expenses"])
    # No financing is known for a reviewed row, so cash flow equals NOI
    cash_flow = noi
    roi_percent = returns.percent_of(data["current_market_value"] - purchase_price, purchase_price)

    return {
        "property_id": f"PROP-{index + 1:03d}",
        "property_name": _first_text(
            row, ("propertyName", "Property Name", "Name"), f"Property {index + 1}"
        ),
        "address": _first_text(row, ("address", "Address"), "Address not specified"),
        "purchase_price": purchase_price,
        "current_market_value": data["current_market_value"],
        "annual_rental_income": data["annual_rental_income"],
        "annual_expenses": data["annual_expenses"],
        "roi_percentage": round(roi_percent, 2),
        "roi_category": returns.categorize_return(roi_percent),
        "recommendation": returns.recommend(noi, roi_percent),
        "analysis": {
            "cash_flow": round(cash_flow, 2),
            "cap_rate": round(returns.calculate_cap_rate(noi, purchase_price), 2),
            "cash_on_cash": round(returns.percent_of(cash_flow, purchase_price), 2),
            "appreciation_potential": appreciation_potential,
            "insurance_cost": round(data["insurance_cost"], 2),
            "interest_rate": round(data["interest_rate"], 2),
            "labour_cost": round(data["labour_cost"], 2),
            "other_costs": round(data["other_costs"], 2),
            "maintenance": round(data["maintenance"], 2),
            "vacancy_rate": round(data["vacancy_rate"], 2),
            "property_taxes": round(data["property_taxes"], 2),
            "property_manager_fee": round(data["property_manager_fee"], 2),
        },
        "concerns": find_concerns(data),
        "suggestions": find_suggestions(data),
    }


def review_portfolio(rows: List[Mapping[str, Any]], **kwargs) -> List[Dict]:
    """Review every property row in order."""
    results = [review_property(row, index, **kwargs) for index, row in enumerate(rows)]
    logger.debug("Reviewed %d properties", len(results))
    return results
