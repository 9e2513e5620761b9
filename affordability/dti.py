"""Debt-to-income policy: how much of gross income may go to debt service."""

from typing import Iterable

from affordability.errors import OutOfDomainError
from affordability.params import FICO_MAX, FICO_MIN, LoanType, MitigatingFactor, parse_factors

# Base limit and the limit any single strong factor lifts it to, in % of
# gross monthly income.
DTI_LIMITS = {
    LoanType.CONVENTIONAL: {"default": 36.0, "strong": 45.0},
    LoanType.FHA: {"default": 43.0, "strong": 50.0},
}

CONVENTIONAL_HIGH_FICO = 720
CONVENTIONAL_LOW_LTV = 75
FHA_HIGH_FICO = 680
FHA_COMPENSATING_FACTORS = 2  # this many distinct factors count as strong


def max_dti(
    fico_score: int,
    ltv: float,
    loan_type: LoanType,
    mitigating_factors: Iterable[MitigatingFactor | str] = (),
) -> float:
    """Maximum back-end DTI allowed, as a percentage.

    Starts from the loan type's base limit; every triggered override lifts
    it to at least the strong-factor limit. Overrides never stack or lower
    the limit, so adding a factor can only keep or raise the result.
    """
    if not FICO_MIN <= fico_score <= FICO_MAX:
        raise OutOfDomainError(f"FICO score must be between {FICO_MIN} and {FICO_MAX}, got {fico_score}")
    if not 0 <= ltv <= 100:
        raise OutOfDomainError(f"LTV must be between 0 and 100, got {ltv}")
    loan_type = LoanType(loan_type)
    factors = parse_factors(mitigating_factors)
    limits = DTI_LIMITS[loan_type]
    limit = limits["default"]

    if loan_type is LoanType.CONVENTIONAL:
        triggered = [
            fico_score >= CONVENTIONAL_HIGH_FICO,
            MitigatingFactor.RESERVES in factors,
            ltv <= CONVENTIONAL_LOW_LTV,
        ]
    else:
        triggered = [
            fico_score >= FHA_HIGH_FICO,
            MitigatingFactor.RESERVES in factors,
            len(factors) >= FHA_COMPENSATING_FACTORS,
        ]

    for hit in triggered:
        if hit:
            limit = max(limit, limits["strong"])
    return limit


def debt_to_income(monthly_obligations: float, annual_income: float) -> float:
    """Back-end DTI (%) for the given total monthly obligations."""
    if annual_income <= 0:
        raise OutOfDomainError("DTI is not meaningful without positive income")
    return monthly_obligations / (annual_income / 12) * 100
