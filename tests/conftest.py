"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculations.models import (
    ExitAssumption,
    ExpenseCategory,
    InvestmentScenario,
    LoanTerms,
    PropertyFinancials,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def financed_scenario():
    """$200k purchase, 20% down, 6% over 30 years, $2,000 rent, $800/mo expenses."""
    return InvestmentScenario(
        loan=LoanTerms(principal=160000, annual_interest_rate_percent=6, term_years=30),
        financials=PropertyFinancials(
            purchase_price=200000,
            current_value=200000,
            monthly_rent=2000,
            expense_categories={"operating": ExpenseCategory(annual_amount=9600)},
        ),
        down_payment_amount=40000,
        holding_period_years=10,
        exit_assumption=ExitAssumption(annual_appreciation_percent=3),
    )


@pytest.fixture
def cash_scenario():
    """$350k cash purchase, $2,400 rent, $1,000/mo expenses, 10 year hold."""
    return InvestmentScenario(
        financials=PropertyFinancials(
            purchase_price=350000,
            current_value=350000,
            monthly_rent=2400,
            expense_categories={"operating": ExpenseCategory(annual_amount=12000)},
        ),
        down_payment_amount=350000,
        holding_period_years=10,
    )
