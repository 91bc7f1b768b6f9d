"""
Financial Calculation Engine

Core calculation modules for rental property investment analysis.
Calculations take plain numbers in and return plain numbers out, with no I/O.
"""

from app.calculations import amortization, cashflow, returns, exit_scenario, investment, equity, review
from app.calculations.investment import calculate

__all__ = [
    "amortization",
    "cashflow",
    "returns",
    "exit_scenario",
    "investment",
    "equity",
    "review",
    "calculate",
]
