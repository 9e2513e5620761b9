"""Savings goals: how far the buyer is from the next better scenario."""

import math
from dataclasses import dataclass

from affordability.bands import next_fico_band, next_ltv_band
from affordability.params import AffordabilityResult, BorrowerProfile, GoalParams, LoanParameters


@dataclass(frozen=True)
class GoalPlan:
    target_fico: int | None
    target_down_payment: float | None
    current_down_payment: float
    monthly_expenses: float  # total of the itemised expenses
    monthly_savings: float
    months_to_down_payment: int | None  # None when savings can't get there


def monthly_savings(annual_income: float, monthly_debts: float, monthly_expenses: float) -> float:
    """Gross monthly income left after debts and living expenses."""
    return annual_income / 12 - monthly_expenses - monthly_debts


def months_to_goal(target: float, current: float, savings_per_month: float) -> int | None:
    """Whole months of saving needed to go from ``current`` to ``target``."""
    needed = target - current
    if needed <= 0:
        return 0
    if savings_per_month <= 0:
        return None
    return math.ceil(needed / savings_per_month)


def suggest_goals(
    borrower: BorrowerProfile,
    loan: LoanParameters,
    result: AffordabilityResult | None,
    goals: GoalParams | None = None,
) -> GoalPlan:
    """Fill in goal targets the buyer hasn't set and time the down payment goal.

    An unset (or not-an-improvement) target FICO defaults to the next pricing
    band; an unset target down payment defaults to what the next lower LTV
    band would take at the current max home price. Without a result (the
    borrower is ineligible) only an explicit down payment target is timed.
    """
    goals = goals or GoalParams()

    target_fico = goals.target_fico
    if target_fico is None or target_fico <= borrower.fico_score:
        target_fico = next_fico_band(borrower.fico_score, loan.loan_type)

    target_down = goals.target_down_payment
    if target_down is None or target_down <= goals.current_down_payment:
        lower_ltv = next_ltv_band(loan.ltv)
        if lower_ltv is not None and result is not None:
            target_down = result.max_home_price * (100 - lower_ltv) / 100
        else:
            target_down = None

    expenses = sum((goals.monthly_expenses or {}).values())
    savings = monthly_savings(borrower.annual_income, borrower.monthly_debts, expenses)
    months = None
    if target_down is not None:
        months = months_to_goal(target_down, goals.current_down_payment, savings)

    return GoalPlan(
        target_fico=target_fico,
        target_down_payment=target_down,
        current_down_payment=goals.current_down_payment,
        monthly_expenses=expenses,
        monthly_savings=savings,
        months_to_down_payment=months,
    )
