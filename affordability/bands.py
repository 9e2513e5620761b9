"""Banded lookup tables and band navigation.

A band table is a list of (lower_bound, value) pairs sorted ascending by
lower bound. Each band covers [lower_bound, next lower_bound); the last band
is open-ended. Every lookup in the engine (FICO and LTV pricing, MIP, PMI)
goes through ``band_value``.
"""

import bisect
import math

from affordability.errors import OutOfDomainError
from affordability.params import LoanType

Band = tuple[float, float]

# Score boundaries at which pricing improves, ascending.
CONVENTIONAL_FICO_BOUNDARIES = [620, 640, 660, 680, 700, 720, 740]
FHA_FICO_FLOOR = 500
FHA_FICO_BOUNDARIES = [580, 620, 640, 660, 680, 700, 720, 740]

# LTV boundaries a buyer can step down to with a bigger down payment, descending.
LTV_BOUNDARIES = [97, 95, 90, 85, 80, 75, 70, 60]


def band_value(bands: list[Band], x: float) -> float:
    """Return the value of the last band whose lower bound is <= x."""
    if not math.isfinite(x):
        raise OutOfDomainError(f"Cannot look up a band for {x!r}")
    i = bisect.bisect_right([lower for lower, _ in bands], x)
    if i == 0:
        raise OutOfDomainError(f"{x} is below the lowest band ({bands[0][0]})")
    return bands[i - 1][1]


def next_boundary_above(boundaries: list[float], x: float) -> float | None:
    """Smallest boundary strictly greater than x (boundaries ascending)."""
    for b in boundaries:
        if b > x:
            return b
    return None


def next_boundary_below(boundaries: list[float], x: float) -> float | None:
    """Largest boundary strictly less than x (boundaries descending)."""
    for b in boundaries:
        if b < x:
            return b
    return None


def next_fico_band(current_fico: int, loan_type: LoanType) -> int | None:
    """Next FICO score that reaches a better pricing band, or None.

    None when already in the top band (>= 740) or, for FHA, when below the
    500 floor where no band improvement makes the loan eligible.
    """
    if LoanType(loan_type) is LoanType.FHA:
        if current_fico < FHA_FICO_FLOOR:
            return None
        return next_boundary_above(FHA_FICO_BOUNDARIES, current_fico)
    return next_boundary_above(CONVENTIONAL_FICO_BOUNDARIES, current_fico)


def next_ltv_band(current_ltv: float) -> int | None:
    """Next lower (more favorable) LTV boundary, or None at or below 60."""
    return next_boundary_below(LTV_BOUNDARIES, current_ltv)
