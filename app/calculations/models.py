"""
Investment Scenario Data Model

Immutable value objects passed into and returned from the calculation engine.
All rates are expressed as percents (e.g., 6.0 for 6%).
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass, field, asdict

# Longest holding period or loan term the model compounds over
MAX_PERIOD_YEARS = 100


@dataclass(frozen=True)
class LoanTerms:
    """Fixed-rate loan. A zero principal or zero term means a cash purchase."""

    principal: float = 0.0
    annual_interest_rate_percent: float = 0.0
    term_years: int = 0

    @property
    def term_months(self) -> int:
        return min(self.term_years, MAX_PERIOD_YEARS) * 12


@dataclass(frozen=True)
class ExpenseCategory:
    """A recurring operating expense, stated as an annual amount."""

    annual_amount: float = 0.0
    annual_escalation_percent: float = 0.0


@dataclass(frozen=True)
class PropertyFinancials:
    """Income and operating expense inputs for a single property."""

    purchase_price: float = 0.0
    current_value: float = 0.0  # Current market value, or after-repair value
    monthly_rent: float = 0.0
    monthly_rent_escalation_percent: float = 0.0
    other_monthly_income: float = 0.0
    other_income_escalation_percent: float = 0.0
    expense_categories: Dict[str, ExpenseCategory] = field(default_factory=dict)
    vacancy_rate_percent: float = 0.0
    management_fee_percent: float = 0.0

    @property
    def property_value(self) -> float:
        """Value used for cap rate and unlevered ROE."""
        return self.purchase_price if self.purchase_price > 0 else self.current_value

    @property
    def exit_base_value(self) -> float:
        """Value that appreciation compounds from at exit."""
        return self.current_value if self.current_value > 0 else self.purchase_price


@dataclass(frozen=True)
class ExitAssumption:
    """Either a known future sale price or an annual appreciation rate."""

    known_sale_price: Optional[float] = None
    annual_appreciation_percent: float = 0.0


@dataclass(frozen=True)
class InvestmentScenario:
    """Everything needed to model one property investment."""

    loan: LoanTerms = field(default_factory=LoanTerms)
    financials: PropertyFinancials = field(default_factory=PropertyFinancials)
    down_payment_amount: float = 0.0
    closing_costs: float = 0.0
    renovation_cost: float = 0.0
    holding_period_years: int = 0
    exit_assumption: ExitAssumption = field(default_factory=ExitAssumption)
    cost_to_sell_percent: float = 0.0

    @property
    def holding_years(self) -> int:
        """Holding period, capped at MAX_PERIOD_YEARS."""
        return min(self.holding_period_years, MAX_PERIOD_YEARS)


@dataclass(frozen=True)
class YearProjection:
    """One holding year of the cash flow projection (annual figures)."""

    year: int
    gross_income: float
    effective_income: float
    management_fee: float
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cumulative_cash_flow: float = 0.0
    loan_balance: float = 0.0
    property_value: float = 0.0
    equity: float = 0.0


@dataclass(frozen=True)
class CalculationResult:
    """Output of a single calculation. Never mutated after construction."""

    monthly_mortgage_payment: float
    effective_monthly_income: float
    total_monthly_expenses: float
    monthly_cash_flow: float
    annual_cash_flow: float
    total_initial_investment: float
    cap_rate_percent: float
    cash_on_cash_return_percent: float
    projected_sale_price: float
    total_profit: float
    total_roi_percent: float
    annualized_return_percent: float

    # Supplementary metrics
    loan_amount: float = 0.0
    annual_noi: float = 0.0
    annual_debt_service: float = 0.0
    dscr: float = 0.0
    unlevered_roe_percent: float = 0.0
    levered_roe_percent: float = 0.0
    remaining_loan_balance: float = 0.0
    selling_costs: float = 0.0
    net_sale_proceeds: float = 0.0
    cumulative_cash_flow: float = 0.0
    category: str = "fair"
    recommendation: str = "hold"
    yearly_projections: Tuple[YearProjection, ...] = ()

    def to_dict(self) -> Dict:
        """All fields as plain JSON-serializable types."""
        data = asdict(self)
        data["yearly_projections"] = list(data["yearly_projections"])
        return data

    def summary(self) -> Dict:
        """Condensed view stored alongside a saved analysis."""
        return {
            "category": self.category,
            "recommendation": self.recommendation,
            "cap_rate_percent": self.cap_rate_percent,
            "cash_on_cash_return_percent": self.cash_on_cash_return_percent,
            "total_roi_percent": self.total_roi_percent,
            "annualized_return_percent": self.annualized_return_percent,
            "monthly_cash_flow": self.monthly_cash_flow,
        }
