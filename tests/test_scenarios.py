"""Tests for the affordability pipeline and what-if scenarios."""

from dataclasses import replace

import pytest
from affordability.errors import IneligibleError, MissingInputError, UnaffordableError
from affordability.model import housing_budget
from affordability.params import LoanType, RateQuote, ScenarioDimension
from affordability.scenarios import analyze, evaluate, what_if_scenarios


class TestEvaluate:
    def test_reference_buyer(self, borrower, loan, rates):
        r = evaluate(borrower, loan, rates)
        # 6.5 base + 0.25 (FICO 700) + 0.125 (LTV 80)
        assert r.adjusted_rate == pytest.approx(6.875)
        assert r.max_dti == 36
        assert r.annual_mi_pct == 0.0
        assert r.monthly_mi == 0.0
        assert r.max_home_price == pytest.approx(356_440, rel=1e-3)
        assert r.monthly_payment == 2_300
        assert r.loan_amount == pytest.approx(r.max_home_price * 0.8)
        assert r.down_payment == pytest.approx(r.max_home_price * 0.2)

    def test_payment_dti(self, borrower, loan, rates):
        r = evaluate(borrower, loan, rates)
        # (2,300 payment + 400 debts) / 7,500 gross
        assert r.payment_dti == pytest.approx(36.0, abs=0.05)
        assert r.payment_dti <= r.max_dti + 0.01

    def test_is_deterministic(self, borrower, loan, rates):
        assert evaluate(borrower, loan, rates) == evaluate(borrower, loan, rates)

    def test_payment_fits_budget(self, borrower, loan, rates):
        for ltv in (80, 90, 96.5):
            for loan_type in LoanType:
                alt = replace(loan, ltv=ltv, loan_type=loan_type)
                r = evaluate(borrower, alt, rates)
                budget = housing_budget(borrower.annual_income, borrower.monthly_debts, r.max_dti)
                assert budget - 1.5 <= r.monthly_payment <= budget + 0.5

    def test_fha_charges_mip(self, borrower, loan, rates):
        r = evaluate(borrower, replace(loan, loan_type=LoanType.FHA, ltv=96.5), rates)
        assert r.annual_mi_pct == 0.55
        assert r.upfront_mi == pytest.approx(r.loan_amount * 0.0175)
        assert r.monthly_mi > 0

    def test_ineligible_borrower(self, borrower, loan, rates):
        with pytest.raises(IneligibleError):
            evaluate(replace(borrower, fico_score=600), loan, rates)

    def test_missing_rate(self, borrower, loan):
        with pytest.raises(MissingInputError):
            evaluate(borrower, loan, RateQuote(fha=6.25))

    def test_unaffordable(self, borrower, loan, rates):
        with pytest.raises(UnaffordableError):
            evaluate(replace(borrower, monthly_debts=5_000), loan, rates)


class TestWhatIfScenarios:
    def test_order_and_changes(self, borrower, loan, rates):
        scenarios = what_if_scenarios(borrower, loan, rates)
        assert [s.dimension for s in scenarios] == [
            ScenarioDimension.LOAN_TYPE,
            ScenarioDimension.FICO,
            ScenarioDimension.LTV,
        ]
        loan_type, fico, ltv = scenarios
        assert loan_type.loan_type is LoanType.FHA
        assert fico.fico_change == 20
        assert ltv.ltv_change == -5

    def test_improvements_raise_price(self, borrower, loan, rates):
        base = evaluate(borrower, loan, rates)
        _, fico, ltv = what_if_scenarios(borrower, loan, rates)
        # 720 lifts the DTI limit to 45 and trims the rate
        assert fico.result.max_dti == 45
        assert fico.result.max_home_price > base.max_home_price
        assert ltv.result.adjusted_rate == pytest.approx(6.75)
        assert ltv.result.max_home_price > base.max_home_price

    def test_scenario_reruns_dti(self, borrower, loan, rates):
        loan_type, _, _ = what_if_scenarios(borrower, loan, rates)
        # FHA at FICO 700 qualifies for the 50% limit
        assert loan_type.result.max_dti == 50

    def test_top_bands_have_no_scenarios(self, borrower, loan, rates):
        strong = replace(borrower, fico_score=780)
        low_ltv = replace(loan, ltv=60)
        scenarios = what_if_scenarios(strong, low_ltv, rates)
        assert [s.dimension for s in scenarios] == [ScenarioDimension.LOAN_TYPE]

    def test_ineligible_alternative_kept_with_reason(self, borrower, loan, rates):
        fha_only = replace(borrower, fico_score=560)
        fha_loan = replace(loan, loan_type=LoanType.FHA, ltv=96.5)
        conventional, fico, _ = what_if_scenarios(fha_only, fha_loan, rates)
        assert not conventional.available
        assert "620" in conventional.unavailable_reason
        assert fico.available

    def test_missing_alternate_rate(self, borrower, loan):
        scenarios = what_if_scenarios(borrower, loan, RateQuote(conventional=6.5))
        assert scenarios[0].result is None
        assert "fha" in scenarios[0].unavailable_reason


class TestAnalyze:
    def test_bundle(self, params):
        analysis = analyze(params)
        assert analysis.eligible
        assert analysis.ineligible_reason is None
        assert analysis.result == evaluate(params.borrower, params.loan, params.rates)
        assert len(analysis.scenarios) == 3
        assert analysis.goals.target_fico == 720

    def test_ineligible_borrower_still_gets_scenarios(self, params):
        low = replace(params, borrower=replace(params.borrower, fico_score=600))
        analysis = analyze(low)
        assert analysis.result is None
        assert not analysis.eligible
        assert "at least 620" in analysis.ineligible_reason
        loan_type, fico, ltv = analysis.scenarios
        assert loan_type.loan_type is LoanType.FHA and loan_type.available
        assert fico.fico_change == 20 and fico.available
        assert not ltv.available
        assert analysis.goals.target_fico == 620
        assert analysis.goals.target_down_payment is None

    def test_unaffordable_still_raises(self, params):
        broke = replace(params, borrower=replace(params.borrower, monthly_debts=5_000))
        with pytest.raises(UnaffordableError):
            analyze(broke)
