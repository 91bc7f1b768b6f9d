"""
Run the calculator's default demo scenario and print the results.
Uses the same starting values as the blank calculator form.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.api.calculations import DEFAULT_INVESTMENT_FORM, InvestmentInput
from app.calculations.investment import calculate


def main():
    inputs = InvestmentInput(**DEFAULT_INVESTMENT_FORM)
    result = calculate(inputs.to_scenario())

    print(f"Monthly mortgage:      ${result.monthly_mortgage_payment:,.2f}")
    print(f"Monthly cash flow:     ${result.monthly_cash_flow:,.2f}")
    print(f"Annual cash flow:      ${result.annual_cash_flow:,.2f}")
    print(f"Total cash invested:   ${result.total_initial_investment:,.2f}")
    print(f"Cap rate:              {result.cap_rate_percent:.2f}%")
    print(f"Cash-on-cash return:   {result.cash_on_cash_return_percent:.2f}%")
    print(f"Projected sale price:  ${result.projected_sale_price:,.2f}")
    print(f"Total profit:          ${result.total_profit:,.2f}")
    print(f"Total ROI:             {result.total_roi_percent:.2f}%")
    print(f"Annualized return:     {result.annualized_return_percent:.2f}%")
    print(f"Category:              {result.category} ({result.recommendation})")

    print("\nYear  Cash Flow      Loan Balance   Equity")
    for row in result.yearly_projections:
        print(
            f"{row.year:>4}  {row.cash_flow:>12,.2f}  {row.loan_balance:>13,.2f}  "
            f"{row.equity:>12,.2f}"
        )


if __name__ == "__main__":
    main()
