"""
Financial calculation API endpoints.

These endpoints accept form inputs and return calculated results.
Raw form values are parsed leniently: blank or invalid numbers become 0.
"""

import logging
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional
from datetime import date

from app.calculations import amortization, equity, review
from app.calculations.inputs import (
    parse_int,
    parse_money,
    parse_percent,
    parse_rate,
    parse_years,
)
from app.calculations.investment import calculate
from app.calculations.models import (
    MAX_PERIOD_YEARS,
    ExitAssumption,
    ExpenseCategory,
    InvestmentScenario,
    LoanTerms,
    PropertyFinancials,
)
from app.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()

# Starting values for a blank calculator form
DEFAULT_INVESTMENT_FORM = {
    "purchase_price": 200000,
    "use_loan": True,
    "down_payment_percent": 20,
    "interest_rate": 6,
    "loan_term": 30,
    "closing_cost": 6000,
    "need_repairs": False,
    "repair_cost": 20000,
    "value_after_repairs": 260000,
    "monthly_rent": 2000,
    "monthly_rent_increase": 3,
    "other_monthly_income": 0,
    "other_income_increase": 3,
    "vacancy_rate": 5,
    "management_fee": 0,
    "property_tax": 3000,
    "property_tax_increase": 3,
    "total_insurance": 1200,
    "insurance_increase": 3,
    "hoa_fee": 0,
    "hoa_increase": 3,
    "maintenance": 2000,
    "maintenance_increase": 3,
    "other_costs": 500,
    "other_costs_increase": 3,
    "know_sell_price": True,
    "sell_price": 400000,
    "value_appreciation": 3,
    "holding_length": 20,
    "cost_to_sell": 8,
}


class InvestmentInput(BaseModel):
    """Input for the investment calculator. Annual amounts unless noted."""

    # Purchase & financing
    purchase_price: float = 0.0
    use_loan: bool = True
    down_payment_percent: float = 0.0
    interest_rate: float = 0.0
    loan_term: int = 0
    closing_cost: float = 0.0

    # Renovation
    need_repairs: bool = False
    repair_cost: float = 0.0
    value_after_repairs: float = 0.0

    # Income (monthly)
    monthly_rent: float = 0.0
    monthly_rent_increase: float = 0.0
    other_monthly_income: float = 0.0
    other_income_increase: float = 0.0
    vacancy_rate: float = 0.0
    management_fee: float = 0.0

    # Expenses
    property_tax: float = 0.0
    property_tax_increase: float = 0.0
    total_insurance: float = 0.0
    insurance_increase: float = 0.0
    hoa_fee: float = 0.0
    hoa_increase: float = 0.0
    maintenance: float = 0.0
    maintenance_increase: float = 0.0
    other_costs: float = 0.0
    other_costs_increase: float = 0.0

    # Exit
    know_sell_price: bool = False
    sell_price: float = 0.0
    value_appreciation: float = 0.0
    holding_length: int = 0
    cost_to_sell: float = 0.0

    @field_validator(
        "purchase_price",
        "closing_cost",
        "repair_cost",
        "value_after_repairs",
        "monthly_rent",
        "other_monthly_income",
        "property_tax",
        "total_insurance",
        "hoa_fee",
        "maintenance",
        "other_costs",
        "sell_price",
        mode="before",
    )
    @classmethod
    def _money(cls, value):
        return parse_money(value)

    @field_validator(
        "down_payment_percent",
        "interest_rate",
        "vacancy_rate",
        "management_fee",
        "cost_to_sell",
        mode="before",
    )
    @classmethod
    def _percent(cls, value):
        return parse_percent(value)

    # Escalation and appreciation may be negative
    @field_validator(
        "monthly_rent_increase",
        "other_income_increase",
        "property_tax_increase",
        "insurance_increase",
        "hoa_increase",
        "maintenance_increase",
        "other_costs_increase",
        "value_appreciation",
        mode="before",
    )
    @classmethod
    def _rate(cls, value):
        return parse_rate(value)

    @field_validator("loan_term", "holding_length", mode="before")
    @classmethod
    def _years(cls, value):
        return parse_int(value, maximum=MAX_PERIOD_YEARS)

    @field_validator("use_loan", "need_repairs", "know_sell_price", mode="before")
    @classmethod
    def _flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)

    def to_scenario(self) -> InvestmentScenario:
        """Build the immutable scenario the calculation engine runs on."""
        if self.use_loan:
            down_payment = self.purchase_price * self.down_payment_percent / 100
        else:
            down_payment = self.purchase_price
        loan = LoanTerms(
            principal=self.purchase_price - down_payment if self.use_loan else 0.0,
            annual_interest_rate_percent=self.interest_rate,
            term_years=self.loan_term if self.use_loan else 0,
        )

        expenses = {
            "property_tax": ExpenseCategory(self.property_tax, self.property_tax_increase),
            "insurance": ExpenseCategory(self.total_insurance, self.insurance_increase),
            "hoa": ExpenseCategory(self.hoa_fee, self.hoa_increase),
            "maintenance": ExpenseCategory(self.maintenance, self.maintenance_increase),
            "other": ExpenseCategory(self.other_costs, self.other_costs_increase),
        }

        current_value = self.purchase_price
        if self.need_repairs and self.value_after_repairs > 0:
            current_value = self.value_after_repairs

        return InvestmentScenario(
            loan=loan,
            financials=PropertyFinancials(
                purchase_price=self.purchase_price,
                current_value=current_value,
                monthly_rent=self.monthly_rent,
                monthly_rent_escalation_percent=self.monthly_rent_increase,
                other_monthly_income=self.other_monthly_income,
                other_income_escalation_percent=self.other_income_increase,
                expense_categories=expenses,
                vacancy_rate_percent=self.vacancy_rate,
                management_fee_percent=self.management_fee,
            ),
            down_payment_amount=down_payment,
            closing_costs=self.closing_cost,
            renovation_cost=self.repair_cost if self.need_repairs else 0.0,
            holding_period_years=self.holding_length,
            exit_assumption=ExitAssumption(
                known_sale_price=self.sell_price if self.know_sell_price else None,
                annual_appreciation_percent=self.value_appreciation,
            ),
            cost_to_sell_percent=self.cost_to_sell,
        )


class InvestmentResponse(BaseModel):
    """Response with calculated metrics and per-year projections."""

    results: Dict[str, Any]
    summary: Dict[str, Any]
    yearly_projections: List[dict]


@router.get("/investment/defaults")
async def investment_defaults():
    """Starting values for the calculator form."""
    return DEFAULT_INVESTMENT_FORM


@router.post("/investment", response_model=InvestmentResponse)
async def calculate_investment(inputs: InvestmentInput):
    """Run the full investment model for one property."""
    result = calculate(inputs.to_scenario())
    logger.debug(
        "Investment calculated: cash flow %.2f/mo, total ROI %.2f%%",
        result.monthly_cash_flow,
        result.total_roi_percent,
    )

    data = result.to_dict()
    projections = data.pop("yearly_projections")

    return InvestmentResponse(
        results=data,
        summary=result.summary(),
        yearly_projections=projections,
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float
    annual_rate: float = 0.0
    amortization_years: int = 30
    total_months: Optional[int] = None
    start_date: Optional[date] = None

    @field_validator("principal", mode="before")
    @classmethod
    def _money(cls, value):
        return parse_money(value)

    @field_validator("annual_rate", mode="before")
    @classmethod
    def _percent(cls, value):
        return parse_percent(value)

    @field_validator("amortization_years", mode="before")
    @classmethod
    def _years(cls, value):
        return parse_int(value, maximum=MAX_PERIOD_YEARS)

    @field_validator("total_months", mode="before")
    @classmethod
    def _months(cls, value):
        if value is None:
            return None
        return parse_int(value, maximum=MAX_PERIOD_YEARS * 12)


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    months = inputs.amortization_years * 12
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate,
        amortization_months=months,
        total_months=inputs.total_months,
        start_date=inputs.start_date,
    )

    return {
        "monthly_payment": amortization.calculate_payment(
            inputs.principal, inputs.annual_rate, months
        ),
        "loan_constant": amortization.calculate_loan_constant(
            inputs.principal, inputs.annual_rate, inputs.amortization_years
        ),
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }


class RoeInput(BaseModel):
    """Input for return on equity analysis of a property already owned."""

    purchase_price: float = 0.0
    debt: float = 0.0  # Original loan amount
    down_payment: float = 0.0
    out_of_pocket_reno: float = 0.0
    closing_costs: float = 0.0
    current_fmv: float = 0.0
    current_debt: Optional[float] = None
    annual_rental_income: float = 0.0
    annual_expenses: float = 0.0
    interest: float = 0.0
    amortization: int = 360  # Months
    years_held: float = 0.0
    current_payment: Optional[float] = None  # Monthly

    @field_validator(
        "purchase_price",
        "debt",
        "down_payment",
        "out_of_pocket_reno",
        "closing_costs",
        "current_fmv",
        "annual_rental_income",
        "annual_expenses",
        mode="before",
    )
    @classmethod
    def _money(cls, value):
        return parse_money(value)

    @field_validator("current_debt", "current_payment", mode="before")
    @classmethod
    def _optional_money(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return parse_money(value)

    @field_validator("interest", mode="before")
    @classmethod
    def _percent(cls, value):
        return parse_percent(value)

    @field_validator("amortization", mode="before")
    @classmethod
    def _months(cls, value):
        return parse_int(value, maximum=MAX_PERIOD_YEARS * 12)

    @field_validator("years_held", mode="before")
    @classmethod
    def _years(cls, value):
        return parse_years(value, maximum=MAX_PERIOD_YEARS)


@router.post("/roe")
async def calculate_roe(inputs: RoeInput):
    """Calculate levered and unlevered return on equity."""
    annual_debt_service = None
    if inputs.current_payment is not None:
        annual_debt_service = amortization.calculate_annual_debt_service(inputs.current_payment)

    return equity.calculate_roe_analysis(
        purchase_price=inputs.purchase_price,
        down_payment=inputs.down_payment,
        out_of_pocket_reno=inputs.out_of_pocket_reno,
        current_fmv=inputs.current_fmv,
        annual_rental_income=inputs.annual_rental_income,
        annual_expenses=inputs.annual_expenses,
        current_debt=inputs.current_debt,
        annual_debt_service=annual_debt_service,
        loan_amount=inputs.debt,
        annual_rate_percent=inputs.interest,
        amortization_months=inputs.amortization,
        years_held=inputs.years_held,
        closing_costs=inputs.closing_costs,
    )


class RoiReviewInput(BaseModel):
    """Property rows as parsed from a portfolio spreadsheet."""

    properties: List[Dict[str, Any]]


@router.post("/roi")
async def review_roi(inputs: RoiReviewInput):
    """Review ROI, concerns and suggestions for each property."""
    if not inputs.properties:
        raise HTTPException(status_code=400, detail="No properties provided")

    settings = get_settings()
    results = review.review_portfolio(
        inputs.properties,
        default_vacancy_rate=settings.default_vacancy_rate_percent,
        appreciation_potential=settings.default_appreciation_potential_percent,
    )

    return {"results": results, "total": len(results)}
