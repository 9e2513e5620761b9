"""The affordability pipeline and its what-if scenarios.

``evaluate`` runs the engines in order: DTI limit, adjusted rate, mortgage
insurance rate, max price, then prices the resulting loan. Scenarios re-run
the same pipeline with one input swapped for a better (or different) one.
"""

from dataclasses import dataclass, replace

from affordability.bands import next_fico_band, next_ltv_band
from affordability.dti import debt_to_income, max_dti
from affordability.errors import IneligibleError, MissingInputError, UnaffordableError
from affordability.goals import GoalPlan, suggest_goals
from affordability.insurance import annual_mi_rate, monthly_mi, upfront_mi
from affordability.model import max_purchase_price, monthly_payment
from affordability.params import (
    AffordabilityResult,
    BorrowerProfile,
    LoanParameters,
    LoanType,
    RateQuote,
    Scenario,
    ScenarioDimension,
    ScenarioParams,
)
from affordability.pricing import adjusted_rate


def evaluate(borrower: BorrowerProfile, loan: LoanParameters, rates: RateQuote) -> AffordabilityResult:
    """Run the full pipeline for one set of inputs.

    Propagates MissingInputError, IneligibleError and UnaffordableError.
    """
    dti_limit = max_dti(borrower.fico_score, loan.ltv, loan.loan_type, borrower.mitigating_factors)
    rate = adjusted_rate(rates, borrower.fico_score, loan.ltv, loan.loan_type)
    mi_pct = annual_mi_rate(loan.loan_type, loan.ltv, loan.term_years)

    price = max_purchase_price(
        borrower.annual_income,
        borrower.monthly_debts,
        dti_limit,
        rate,
        loan.property_tax_rate,
        loan.annual_insurance,
        loan.down_payment_pct,
        pmi_rate_pct=mi_pct,
        term_years=loan.term_years,
    )
    loan_amount = price * loan.ltv / 100
    payment = monthly_payment(
        loan_amount,
        rate,
        loan.term_years,
        annual_property_tax=loan.property_tax_rate / 100 * price,
        annual_insurance=loan.annual_insurance,
        annual_pmi_pct=mi_pct,
    )

    return AffordabilityResult(
        max_home_price=price,
        loan_amount=loan_amount,
        down_payment=price - loan_amount,
        monthly_payment=payment,
        max_dti=dti_limit,
        adjusted_rate=rate,
        annual_mi_pct=mi_pct,
        monthly_mi=monthly_mi(loan_amount, mi_pct),
        payment_dti=debt_to_income(payment + borrower.monthly_debts, borrower.annual_income),
        upfront_mi=upfront_mi(loan_amount, loan.loan_type),
    )


def _scenario(
    dimension: ScenarioDimension,
    borrower: BorrowerProfile,
    loan: LoanParameters,
    rates: RateQuote,
    fico_change: int = 0,
    ltv_change: float = 0.0,
) -> Scenario:
    try:
        result = evaluate(borrower, loan, rates)
    except (IneligibleError, MissingInputError, UnaffordableError) as exc:
        return Scenario(
            dimension=dimension,
            loan_type=loan.loan_type,
            fico_change=fico_change,
            ltv_change=ltv_change,
            unavailable_reason=str(exc),
        )
    return Scenario(
        dimension=dimension,
        loan_type=loan.loan_type,
        fico_change=fico_change,
        ltv_change=ltv_change,
        result=result,
    )


def loan_type_scenario(borrower: BorrowerProfile, loan: LoanParameters, rates: RateQuote) -> Scenario:
    """Same borrower and LTV under the other loan type."""
    alt = replace(loan, loan_type=LoanType(loan.loan_type).other)
    return _scenario(ScenarioDimension.LOAN_TYPE, borrower, alt, rates)


def fico_scenario(borrower: BorrowerProfile, loan: LoanParameters, rates: RateQuote) -> Scenario | None:
    """Borrower's score raised to the next pricing band, if there is one."""
    target = next_fico_band(borrower.fico_score, loan.loan_type)
    if target is None:
        return None
    better = replace(borrower, fico_score=target)
    return _scenario(
        ScenarioDimension.FICO, better, loan, rates, fico_change=target - borrower.fico_score
    )


def ltv_scenario(borrower: BorrowerProfile, loan: LoanParameters, rates: RateQuote) -> Scenario | None:
    """Bigger down payment: LTV lowered to the next band, if there is one."""
    target = next_ltv_band(loan.ltv)
    if target is None:
        return None
    lower = replace(loan, ltv=float(target))
    return _scenario(ScenarioDimension.LTV, borrower, lower, rates, ltv_change=target - loan.ltv)


def what_if_scenarios(borrower: BorrowerProfile, loan: LoanParameters, rates: RateQuote) -> list[Scenario]:
    """Alternate loan type, next FICO band, next lower LTV band, in that order.

    A scenario that cannot be priced (no base rate for the alternate loan
    type, score below its floor, budget too small) is kept with its reason.
    """
    scenarios = [loan_type_scenario(borrower, loan, rates)]
    for build in (fico_scenario, ltv_scenario):
        scenario = build(borrower, loan, rates)
        if scenario is not None:
            scenarios.append(scenario)
    return scenarios


@dataclass(frozen=True)
class Analysis:
    """Primary result plus the improvement scenarios and goal plan.

    ``result`` is None when the borrower is ineligible for the chosen loan
    type; ``ineligible_reason`` says why, and the scenarios still show what
    would make the loan work.
    """

    params: ScenarioParams
    result: AffordabilityResult | None
    scenarios: list[Scenario]
    goals: GoalPlan
    ineligible_reason: str | None = None

    @property
    def eligible(self) -> bool:
        return self.result is not None


def analyze(params: ScenarioParams) -> Analysis:
    """Evaluate a complete scenario bundle.

    Ineligibility for the chosen loan type is reported on the Analysis;
    missing inputs and an unaffordable budget still raise.
    """
    reason = None
    try:
        result = evaluate(params.borrower, params.loan, params.rates)
    except IneligibleError as exc:
        result = None
        reason = str(exc)
    return Analysis(
        params=params,
        result=result,
        scenarios=what_if_scenarios(params.borrower, params.loan, params.rates),
        goals=suggest_goals(params.borrower, params.loan, result, params.goals),
        ineligible_reason=reason,
    )
