"""Mortgage insurance: FHA MIP and conventional PMI estimation.

Rates are annual percentages of the loan amount unless noted. Conventional
PMI bands are a simple LTV-only estimate; real PMI pricing also varies by
credit score and insurer.
"""

import math

from affordability.bands import Band, band_value
from affordability.errors import OutOfDomainError
from affordability.params import LoanType, MipRates


def _above(x: float) -> float:
    """Lower bound for a band that starts just above x (x belongs below)."""
    return math.nextafter(float(x), math.inf)


def _check_ltv(ltv: float) -> None:
    if not 0 <= ltv <= 100:
        raise OutOfDomainError(f"LTV must be between 0 and 100, got {ltv}")


FHA_UPFRONT_MIP = 1.75  # % of base loan amount, financed or paid at closing

FHA_SHORT_TERM_YEARS = 15  # terms at or under this get the short-term schedule

# Annual MIP by LTV: (lower bound, rate). LTV of exactly 90 uses the lower rate.
_FHA_ANNUAL_MIP: dict[bool, list[Band]] = {
    True: [(0, 0.45), (_above(90), 0.70)],  # term <= 15 years
    False: [(0, 0.50), (_above(90), 0.55)],  # term > 15 years
}

# Conventional PMI only applies above 80% LTV.
_CONVENTIONAL_PMI: list[Band] = [
    (0, 0.0),
    (_above(80), 0.3),
    (_above(85), 0.5),
    (_above(90), 0.8),
    (_above(95), 1.1),
]


def fha_mip_rates(loan_amount: float, ltv: float, term_years: int = 30) -> MipRates:
    """Upfront and annual FHA mortgage insurance premium rates.

    Parameters
    ----------
    loan_amount : float
        Base loan amount. Accepted for parity with published MIP schedules,
        which also band by loan size; the current schedule does not use it.
    ltv : float
        Loan-to-value as a percentage (e.g. 96.5).
    term_years : int
        Loan term in years.

    Returns
    -------
    MipRates
        ``upfront_pct`` is always 1.75.
    """
    if term_years <= 0:
        raise OutOfDomainError(f"term_years must be positive, got {term_years}")
    _check_ltv(ltv)
    short_term = term_years <= FHA_SHORT_TERM_YEARS
    return MipRates(
        upfront_pct=FHA_UPFRONT_MIP,
        annual_pct=band_value(_FHA_ANNUAL_MIP[short_term], ltv),
    )


def conventional_pmi_rate(ltv: float) -> float:
    """Estimated annual PMI rate for a conventional loan; 0 at or below 80% LTV."""
    _check_ltv(ltv)
    return band_value(_CONVENTIONAL_PMI, ltv)


def annual_mi_rate(loan_type: LoanType, ltv: float, term_years: int = 30, loan_amount: float = 0.0) -> float:
    """Ongoing annual mortgage insurance rate for either loan type."""
    if LoanType(loan_type) is LoanType.FHA:
        return fha_mip_rates(loan_amount, ltv, term_years).annual_pct
    return conventional_pmi_rate(ltv)


def monthly_mi(loan_amount: float, annual_pct: float) -> float:
    """Monthly mortgage insurance in dollars."""
    return loan_amount * annual_pct / 100 / 12


def upfront_mi(loan_amount: float, loan_type: LoanType) -> float:
    """Upfront premium in dollars (FHA only)."""
    if LoanType(loan_type) is LoanType.FHA:
        return loan_amount * FHA_UPFRONT_MIP / 100
    return 0.0
