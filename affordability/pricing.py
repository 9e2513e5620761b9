"""Rate adjustments: FICO and LTV pricing on top of the market base rate.

All adjustments are in percentage points added to the annual rate.
"""

import math

from affordability.bands import Band, band_value
from affordability.errors import IneligibleError
from affordability.params import LoanType, RateQuote

# Marks a score band the loan type does not underwrite. Sorts after every
# real adjustment but is never returned to callers.
INELIGIBLE = math.inf

MIN_RATE = 0.1  # adjusted rate floor, % p.a.

FICO_ADJUSTMENTS: dict[LoanType, list[Band]] = {
    LoanType.CONVENTIONAL: [
        (300, INELIGIBLE),
        (620, 1.0),
        (640, 0.75),
        (660, 0.5),
        (680, 0.375),
        (700, 0.25),
        (720, 0.125),
        (740, 0.0),
    ],
    LoanType.FHA: [
        (300, INELIGIBLE),
        (500, 0.75),
        (580, 0.5),
        (620, 0.25),
        (640, 0.25),
        (660, 0.25),
        (680, 0.25),
        (700, 0.125),
        (720, 0.0),
        (740, 0.0),
    ],
}

# 97 itself prices with the 95-97 band; the top band starts just above it.
LTV_ADJUSTMENTS: list[Band] = [
    (0, -0.25),
    (60, -0.125),
    (70, 0.0),
    (75, 0.0),
    (80, 0.125),
    (85, 0.25),
    (90, 0.375),
    (95, 0.5),
    (math.nextafter(97.0, math.inf), 0.75),
]


def fico_floor(loan_type: LoanType) -> int:
    """Lowest score the loan type underwrites (620 conventional, 500 FHA)."""
    bands = FICO_ADJUSTMENTS[LoanType(loan_type)]
    return int(next(lower for lower, value in bands if value != INELIGIBLE))


def fico_rate_adjustment(fico_score: int, loan_type: LoanType) -> float:
    """Rate add-on for the borrower's credit score band.

    Raises IneligibleError below the loan type's floor.
    """
    loan_type = LoanType(loan_type)
    adjustment = band_value(FICO_ADJUSTMENTS[loan_type], fico_score)
    if adjustment == INELIGIBLE:
        floor = fico_floor(loan_type)
        raise IneligibleError(
            f"{loan_type.label} loans require a FICO score of at least {floor} (got {fico_score})",
            fico_score=fico_score,
            floor=floor,
        )
    return adjustment


def ltv_rate_adjustment(ltv: float) -> float:
    """Rate add-on (or credit) for the loan-to-value band."""
    return band_value(LTV_ADJUSTMENTS, ltv)


def adjusted_rate(rates: RateQuote, fico_score: int, ltv: float, loan_type: LoanType) -> float:
    """Base rate for the loan type plus FICO and LTV adjustments.

    Raises MissingInputError when the quote has no base rate for the loan
    type. The result never drops below MIN_RATE.
    """
    base = rates.for_loan_type(loan_type)
    adjusted = base + fico_rate_adjustment(fico_score, loan_type) + ltv_rate_adjustment(ltv)
    return max(adjusted, MIN_RATE)
