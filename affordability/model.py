"""Amortization and the affordability solver.

Forward direction: loan amount, rate and term -> monthly PITI + MI.
Inverse direction: income, debts and DTI limit -> the largest home price
whose PITI + MI fits inside the DTI budget.

Both directions share ``payment_factor`` so that pricing a solved home price
back through ``monthly_payment`` lands on the budget.
"""

import math
from dataclasses import dataclass

from affordability.errors import OutOfDomainError, UnaffordableError


@dataclass(frozen=True)
class PaymentBreakdown:
    """Monthly housing payment by component (unrounded dollars)."""

    principal_and_interest: float
    property_tax: float
    insurance: float
    mortgage_insurance: float

    @property
    def total(self) -> float:
        return self.principal_and_interest + self.property_tax + self.insurance + self.mortgage_insurance


def _check_term(term_years: float) -> int:
    if term_years <= 0:
        raise OutOfDomainError(f"term_years must be positive, got {term_years}")
    return round(term_years * 12)


def payment_factor(annual_rate_pct: float, term_years: int = 30) -> float:
    """Monthly P&I per dollar of loan for a fully amortizing fixed-rate loan."""
    n = _check_term(term_years)
    if not math.isfinite(annual_rate_pct) or annual_rate_pct < 0:
        raise OutOfDomainError(f"annual rate must be a non-negative number, got {annual_rate_pct!r}")
    r = annual_rate_pct / 100 / 12
    if r == 0:
        return 1 / n
    growth = (1 + r) ** n
    return r * growth / (growth - 1)


def payment_breakdown(
    loan_amount: float,
    annual_rate_pct: float,
    term_years: int = 30,
    annual_property_tax: float = 0.0,
    annual_insurance: float = 0.0,
    annual_pmi_pct: float = 0.0,
) -> PaymentBreakdown:
    """Split the monthly payment into P&I, tax, insurance and mortgage insurance."""
    return PaymentBreakdown(
        principal_and_interest=loan_amount * payment_factor(annual_rate_pct, term_years),
        property_tax=annual_property_tax / 12,
        insurance=annual_insurance / 12,
        mortgage_insurance=annual_pmi_pct / 100 * loan_amount / 12,
    )


def round_currency(amount: float) -> int:
    """Round half-up to whole dollars."""
    return math.floor(amount + 0.5)


def monthly_payment(
    loan_amount: float,
    annual_rate_pct: float,
    term_years: int = 30,
    annual_property_tax: float = 0.0,
    annual_insurance: float = 0.0,
    annual_pmi_pct: float = 0.0,
) -> int:
    """Total monthly housing payment (PITI + MI), rounded to whole dollars."""
    breakdown = payment_breakdown(
        loan_amount,
        annual_rate_pct,
        term_years,
        annual_property_tax,
        annual_insurance,
        annual_pmi_pct,
    )
    return round_currency(breakdown.total)


def housing_budget(annual_income: float, monthly_debts: float, max_dti_pct: float) -> float:
    """Monthly amount left for housing under the DTI limit."""
    return annual_income / 12 * (max_dti_pct / 100) - monthly_debts


def max_purchase_price(
    annual_income: float,
    monthly_debts: float,
    max_dti_pct: float,
    annual_rate_pct: float,
    property_tax_rate_pct: float,
    annual_insurance: float,
    down_payment_pct: float,
    pmi_rate_pct: float = 0.0,
    term_years: int = 30,
) -> int:
    """Largest home price whose monthly payment fits the DTI budget.

    Every cost except insurance scales with price, so the payment is linear
    in price:

        payment = price * (pi_factor * ltv + tax_rate / 12 + pmi_rate * ltv / 12)
                  + insurance / 12

    and the budget can be solved for price directly. The result is floored
    to whole dollars.

    Raises UnaffordableError when the budget does not cover a positive price.
    """
    if not 0 <= down_payment_pct <= 100:
        raise OutOfDomainError(f"down payment must be between 0 and 100%, got {down_payment_pct}")

    budget = housing_budget(annual_income, monthly_debts, max_dti_pct)
    ltv_fraction = 1 - down_payment_pct / 100

    pi_per_price = payment_factor(annual_rate_pct, term_years) * ltv_fraction
    tax_per_price = property_tax_rate_pct / 100 / 12
    pmi_per_price = pmi_rate_pct / 100 * ltv_fraction / 12
    multiplier = pi_per_price + tax_per_price + pmi_per_price

    available = budget - annual_insurance / 12
    if multiplier <= 0:
        raise UnaffordableError("No price-dependent costs; the price is unbounded", budget=budget)

    price = available / multiplier
    if not math.isfinite(price) or price < 1:
        raise UnaffordableError(
            f"A monthly housing budget of ${budget:,.2f} does not cover "
            f"insurance of ${annual_insurance / 12:,.2f}/mo plus any loan",
            budget=budget,
        )
    return math.floor(price)
