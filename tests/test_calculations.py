"""
Tests for financial calculation engine.
"""

import json
import math
from dataclasses import replace
from datetime import date

import pytest

from app.calculations.amortization import (
    calculate_payment,
    calculate_remaining_balance,
    calculate_loan_constant,
    calculate_total_interest,
    generate_amortization_schedule,
)
from app.calculations.cashflow import (
    calculate_escalation_factor,
    calculate_monthly_cash_flow,
    generate_cash_flows,
    sum_cash_flows,
)
from app.calculations.exit_scenario import (
    calculate_annualized_return,
    calculate_exit,
    project_sale_price,
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
from app.calculations.returns import (
    calculate_cap_rate,
    calculate_cash_on_cash,
    calculate_dscr,
    calculate_levered_roe,
    calculate_unlevered_roe,
    categorize_return,
    recommend,
)


class TestAmortization:
    """Test loan payment and balance calculations."""

    def test_calculate_payment(self):
        """$160k at 6% for 30 years."""
        payment = calculate_payment(160000, 6, 360)
        assert payment == pytest.approx(959.28, abs=0.01)

    def test_zero_principal_is_cash_purchase(self):
        assert calculate_payment(0, 6, 360) == 0.0

    def test_zero_term_is_cash_purchase(self):
        assert calculate_payment(160000, 6, 0) == 0.0

    def test_zero_interest_is_straight_line(self):
        assert calculate_payment(120000, 0, 120) == 1000.0

    def test_remaining_balance_at_start(self):
        assert calculate_remaining_balance(160000, 6, 360, 0) == 160000

    def test_remaining_balance_at_maturity(self):
        assert calculate_remaining_balance(160000, 6, 360, 360) == pytest.approx(0, abs=1e-6)

    def test_remaining_balance_mid_term(self):
        balance = calculate_remaining_balance(160000, 6, 360, 120)
        assert 133000 < balance < 135000

    def test_remaining_balance_never_negative(self):
        assert calculate_remaining_balance(160000, 6, 360, 480) == 0.0
        assert calculate_remaining_balance(120000, 0, 120, 200) == 0.0

    def test_remaining_balance_zero_interest(self):
        assert calculate_remaining_balance(120000, 0, 120, 60) == pytest.approx(60000)

    def test_amortization_schedule_length(self):
        """Test amortization schedule has correct number of periods."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate_percent=6,
            amortization_months=60,
            start_date=date(2025, 1, 1),
        )
        assert len(schedule) == 60
        assert schedule[0]["date"] == "2025-01-01"
        assert schedule[12]["date"] == "2026-01-01"

    def test_amortization_final_balance(self):
        """Test that final balance is zero and principal is fully repaid."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate_percent=6,
            amortization_months=60,
        )
        assert schedule[-1]["ending_balance"] == 0
        assert sum(row["principal"] for row in schedule) == pytest.approx(100000, abs=1)
        assert calculate_total_interest(schedule) > 0

    def test_amortization_schedule_partial(self):
        schedule = generate_amortization_schedule(100000, 6, 360, total_months=24)
        assert len(schedule) == 24
        assert schedule[-1]["ending_balance"] == pytest.approx(
            calculate_remaining_balance(100000, 6, 360, 24), abs=0.01
        )

    def test_amortization_schedule_cash_purchase(self):
        assert generate_amortization_schedule(0, 6, 360) == []

    def test_loan_constant(self):
        constant = calculate_loan_constant(160000, 6, 30)
        assert constant == pytest.approx(959.28 * 12 / 160000 * 100, abs=0.01)
        assert calculate_loan_constant(0, 6, 30) == 0.0


class TestCashFlows:
    """Test cash flow projection."""

    def test_escalation_factor(self):
        assert calculate_escalation_factor(3, 1) == 1.0
        assert calculate_escalation_factor(3, 2) == pytest.approx(1.03)
        assert calculate_escalation_factor(10, 3) == pytest.approx(1.21)

    def test_financed_monthly_cash_flow(self, financed_scenario):
        payment = calculate_payment(160000, 6, 360)
        month = calculate_monthly_cash_flow(financed_scenario.financials, payment)
        assert month["cash_flow"] == pytest.approx(240.72, abs=0.01)
        assert month["total_expenses"] == pytest.approx(800 + payment)

    def test_management_fee_on_collected_income(self):
        financials = PropertyFinancials(
            monthly_rent=2000, vacancy_rate_percent=10, management_fee_percent=10
        )
        month = calculate_monthly_cash_flow(financials, 0.0)
        assert month["effective_income"] == pytest.approx(1800)
        assert month["management_fee"] == pytest.approx(180)
        assert month["cash_flow"] == pytest.approx(1620)

    def test_vacancy_applies_to_other_income(self):
        financials = PropertyFinancials(
            monthly_rent=1000, other_monthly_income=200, vacancy_rate_percent=50
        )
        month = calculate_monthly_cash_flow(financials, 0.0)
        assert month["effective_income"] == pytest.approx(600)

    def test_negative_cash_flow_is_preserved(self):
        financials = PropertyFinancials(
            monthly_rent=1000,
            expense_categories={"tax": ExpenseCategory(annual_amount=24000)},
        )
        month = calculate_monthly_cash_flow(financials, 500.0)
        assert month["cash_flow"] == pytest.approx(-1500)

    def test_categories_escalate_independently(self):
        financials = PropertyFinancials(
            monthly_rent=1000,
            monthly_rent_escalation_percent=10,
            expense_categories={
                "tax": ExpenseCategory(annual_amount=1200, annual_escalation_percent=0),
                "insurance": ExpenseCategory(annual_amount=1200, annual_escalation_percent=100),
            },
        )
        projections = generate_cash_flows(financials, 0.0, 3)
        year3 = projections[2]
        assert year3.gross_income == pytest.approx(1210 * 12)
        assert year3.operating_expenses == pytest.approx(1200 + 4800)
        assert year3.cash_flow == pytest.approx(14520 - 6000)

    def test_mortgage_does_not_escalate(self, financed_scenario):
        payment = calculate_payment(160000, 6, 360)
        projections = generate_cash_flows(financed_scenario.financials, payment, 5)
        assert all(row.debt_service == pytest.approx(payment * 12) for row in projections)

    def test_cumulative_cash_flow(self, cash_scenario):
        projections = generate_cash_flows(cash_scenario.financials, 0.0, 4)
        assert len(projections) == 4
        assert projections[-1].cumulative_cash_flow == pytest.approx(16800 * 4)
        assert sum_cash_flows(projections) == pytest.approx(16800 * 4)
        assert sum_cash_flows(projections, "noi", start_year=2, end_year=3) == pytest.approx(
            16800 * 2
        )

    def test_zero_year_projection_is_empty(self, cash_scenario):
        assert generate_cash_flows(cash_scenario.financials, 0.0, 0) == []


class TestReturnMetrics:
    """Test return ratios and categorization."""

    def test_cap_rate(self):
        assert calculate_cap_rate(14400, 200000) == pytest.approx(7.2)

    def test_cash_on_cash(self):
        assert calculate_cash_on_cash(2888.64, 40000) == pytest.approx(7.2216)

    def test_zero_investment_guard(self):
        assert calculate_cash_on_cash(2888.64, 0) == 0.0
        assert calculate_cap_rate(14400, 0) == 0.0

    def test_unlevered_roe(self):
        assert calculate_unlevered_roe(14400, 300000) == pytest.approx(4.8)

    def test_levered_roe(self):
        assert calculate_levered_roe(14400, 12000, 300000, 200000) == pytest.approx(2.4)

    def test_levered_roe_zero_equity(self):
        assert calculate_levered_roe(14400, 12000, 200000, 200000) == 0.0

    def test_levered_roe_negative_equity_keeps_sign(self):
        assert calculate_levered_roe(5000, 10000, 100000, 150000) == pytest.approx(-10.0)
        assert calculate_levered_roe(14400, 12000, 100000, 150000) == pytest.approx(4.8)

    def test_dscr_without_debt(self):
        assert calculate_dscr(14400, 0) == 0.0
        assert calculate_dscr(14400, 12000) == pytest.approx(1.2)

    @pytest.mark.parametrize(
        "value,expected",
        [
            (15.0, "excellent"),
            (14.99, "good"),
            (10.0, "good"),
            (5.0, "moderate"),
            (0.0, "fair"),
            (-0.01, "poor"),
        ],
    )
    def test_category_boundaries(self, value, expected):
        assert categorize_return(value) == expected

    def test_recommendation(self):
        assert recommend(-1, 20) == "sell"
        assert recommend(1000, -0.5) == "sell"
        assert recommend(1000, 4.99) == "improve"
        assert recommend(1000, 5.0) == "hold"


class TestExitScenario:
    """Test exit sale economics."""

    def test_appreciated_sale_price(self):
        price = project_sale_price(300000, 10, annual_appreciation_percent=3)
        assert price == pytest.approx(403175, abs=1)

    def test_known_sale_price_wins(self):
        assert project_sale_price(300000, 10, 3, known_sale_price=400000) == 400000

    def test_annualized_return(self):
        assert calculate_annualized_return(100, 2) == pytest.approx(41.421356, abs=1e-4)

    def test_annualized_return_zero_years(self):
        assert calculate_annualized_return(50, 0) == 0.0

    def test_annualized_return_total_loss(self):
        assert calculate_annualized_return(-150, 5) == -100.0

    def test_exit_nets_out_loan_and_costs(self):
        loan = LoanTerms(principal=120000, annual_interest_rate_percent=0, term_years=10)
        result = calculate_exit(
            current_value=200000,
            holding_years=5,
            loan=loan,
            total_initial_investment=80000,
            cumulative_cash_flow=10000,
            cost_to_sell_percent=5,
            known_sale_price=250000,
        )
        assert result.remaining_loan_balance == pytest.approx(60000)
        assert result.selling_costs == pytest.approx(12500)
        assert result.net_sale_proceeds == pytest.approx(250000 - 12500 - 60000)
        assert result.total_profit == pytest.approx(177500 - 80000 + 10000)
        assert result.total_roi_percent == pytest.approx(107500 / 80000 * 100)

    def test_paid_off_loan_contributes_nothing(self):
        loan = LoanTerms(principal=100000, annual_interest_rate_percent=5, term_years=15)
        result = calculate_exit(
            current_value=200000,
            holding_years=20,
            loan=loan,
            total_initial_investment=50000,
            cumulative_cash_flow=0,
        )
        assert result.remaining_loan_balance == 0.0
        assert result.net_sale_proceeds == pytest.approx(200000)

    def test_zero_investment_roi_guard(self):
        result = calculate_exit(
            current_value=100000,
            holding_years=5,
            loan=LoanTerms(),
            total_initial_investment=0,
            cumulative_cash_flow=5000,
        )
        assert result.total_roi_percent == 0.0
        assert result.annualized_return_percent == 0.0


class TestInvestmentCalculator:
    """Integration tests for the full calculation."""

    def test_financed_scenario(self, financed_scenario):
        result = calculate(financed_scenario)
        assert result.monthly_mortgage_payment == pytest.approx(959.28, abs=0.01)
        assert result.monthly_cash_flow == pytest.approx(240.72, abs=0.01)
        assert result.annual_cash_flow == pytest.approx(2888.64, abs=0.05)
        assert result.cap_rate_percent == pytest.approx(7.2)
        assert result.cash_on_cash_return_percent == pytest.approx(7.22, abs=0.01)
        assert result.total_initial_investment == 40000
        assert result.dscr == pytest.approx(14400 / result.annual_debt_service)

    def test_financed_scenario_exit_is_consistent(self, financed_scenario):
        result = calculate(financed_scenario)
        assert result.projected_sale_price == pytest.approx(200000 * 1.03 ** 10)
        assert result.total_profit == pytest.approx(
            result.net_sale_proceeds - result.total_initial_investment + result.cumulative_cash_flow
        )
        assert result.cumulative_cash_flow == pytest.approx(result.annual_cash_flow * 10)
        assert result.category == categorize_return(result.total_roi_percent)

    def test_cash_purchase(self, cash_scenario):
        result = calculate(cash_scenario)
        assert result.monthly_mortgage_payment == 0.0
        assert result.monthly_cash_flow == 1400
        assert result.cap_rate_percent == pytest.approx(4.8)
        assert result.dscr == 0.0
        assert result.total_profit == pytest.approx(168000)
        assert result.total_roi_percent == pytest.approx(48)
        assert result.annualized_return_percent == pytest.approx((1.48 ** 0.1 - 1) * 100)
        assert result.category == "excellent"
        assert result.recommendation == "hold"

    def test_yearly_projections_track_equity(self, financed_scenario):
        result = calculate(financed_scenario)
        assert len(result.yearly_projections) == 10
        last = result.yearly_projections[-1]
        assert last.loan_balance == pytest.approx(result.remaining_loan_balance)
        assert last.property_value == pytest.approx(result.projected_sale_price)
        assert last.equity == pytest.approx(last.property_value - last.loan_balance)
        first = result.yearly_projections[0]
        assert first.cash_flow == pytest.approx(result.annual_cash_flow)

    def test_empty_scenario_has_no_nan(self):
        result = calculate(InvestmentScenario())
        for key, value in result.to_dict().items():
            if isinstance(value, float):
                assert not math.isnan(value) and not math.isinf(value), key
        assert result.cash_on_cash_return_percent == 0.0
        assert result.total_roi_percent == 0.0

    def test_calculate_is_pure(self, financed_scenario):
        assert calculate(financed_scenario) == calculate(financed_scenario)

    def test_scenario_is_immutable(self, financed_scenario):
        with pytest.raises(Exception):
            financed_scenario.holding_period_years = 5

    def test_result_is_json_serializable(self, financed_scenario):
        result = calculate(financed_scenario)
        data = json.loads(json.dumps(result.to_dict()))
        assert len(data["yearly_projections"]) == 10
        summary = json.loads(json.dumps(result.summary()))
        assert set(summary) == {
            "category",
            "recommendation",
            "cap_rate_percent",
            "cash_on_cash_return_percent",
            "total_roi_percent",
            "annualized_return_percent",
            "monthly_cash_flow",
        }

    def test_negative_return_recommends_sell(self, cash_scenario):
        losing = replace(
            cash_scenario,
            exit_assumption=ExitAssumption(known_sale_price=100000),
            holding_period_years=1,
        )
        result = calculate(losing)
        assert result.total_roi_percent < 0
        assert result.category == "poor"
        assert result.recommendation == "sell"

    def test_loan_above_current_value(self, financed_scenario):
        # Repairs valued well below the loan leave the owner underwater
        underwater = replace(
            financed_scenario,
            financials=replace(
                financed_scenario.financials, current_value=100000, monthly_rent=1500
            ),
        )
        result = calculate(underwater)
        after_debt = result.annual_noi - result.annual_debt_service
        assert after_debt < 0
        assert result.levered_roe_percent == pytest.approx(after_debt / 60000 * 100)
        assert result.levered_roe_percent < 0

    def test_long_horizon_is_capped(self, cash_scenario):
        long_hold = replace(
            cash_scenario,
            holding_period_years=30000,
            exit_assumption=ExitAssumption(annual_appreciation_percent=3),
        )
        result = calculate(long_hold)
        assert len(result.yearly_projections) == MAX_PERIOD_YEARS
        assert result.projected_sale_price == pytest.approx(350000 * 1.03 ** MAX_PERIOD_YEARS)
        assert math.isfinite(result.annualized_return_percent)

    def test_long_loan_term_is_capped(self):
        loan = LoanTerms(principal=100000, annual_interest_rate_percent=6, term_years=30000)
        assert loan.term_months == MAX_PERIOD_YEARS * 12
        result = calculate(InvestmentScenario(loan=loan, holding_period_years=5))
        assert math.isfinite(result.monthly_mortgage_payment)
        assert result.monthly_mortgage_payment > 500
