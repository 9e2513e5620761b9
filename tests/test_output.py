"""Tests for report, CSV and DataFrame output."""

import csv
import io
from dataclasses import replace

import pytest
from affordability.output import fmt, full_report, scenario_dataframe, summary_header, to_csv
from affordability.params import RateQuote
from affordability.scenarios import analyze


class TestFmt:
    def test_dollars(self):
        assert fmt(356_440) == "$356,440"

    def test_millions(self):
        assert fmt(1_250_000) == "$1.25M"


class TestReport:
    def test_sections(self, params):
        report = full_report(analyze(params))
        assert "Maximum home price" in report
        assert "Switch to FHA" in report
        assert "Raise FICO by 20 points" in report
        assert "Lower LTV by 5 points" in report
        assert "Target FICO" in report

    def test_unavailable_scenario_shows_reason(self, params):
        no_fha = replace(params, rates=RateQuote(conventional=6.5))
        report = full_report(analyze(no_fha))
        assert "unavailable: No base rate available for fha loans" in report

    def test_fallback_note(self, params):
        flagged = replace(params, market_fallbacks=("loan.annual_insurance",))
        assert "fallback market data used for loan.annual_insurance" in summary_header(flagged)
        assert "fallback" not in summary_header(params)

    def test_ineligible_report(self, params):
        low = replace(params, borrower=replace(params.borrower, fico_score=600))
        report = full_report(analyze(low))
        assert "Ineligible: Conventional loans require a FICO score of at least 620" in report
        assert "Maximum home price" not in report
        assert "Switch to FHA" in report

    def test_payment_dti_shown(self, params):
        assert "Payment DTI:         36.0%" in full_report(analyze(params))


class TestCsv:
    def test_rows(self, params):
        analysis = analyze(params)
        rows = list(csv.DictReader(io.StringIO(to_csv(analysis))))
        assert len(rows) == 4
        assert rows[0]["scenario"] == "Current"
        assert int(rows[0]["max_home_price"]) == analysis.result.max_home_price
        assert float(rows[0]["payment_dti"]) == pytest.approx(36.0, abs=0.05)


class TestDataFrame:
    def test_price_change(self, params):
        analysis = analyze(params)
        df = scenario_dataframe(analysis)
        assert list(df["scenario"])[0] == "Current"
        assert df["price_change"].iloc[0] == 0
        assert (df["price_change"].iloc[1:] > 0).all()
        assert df["payment_dti"].iloc[0] == pytest.approx(36.0, abs=0.05)

    def test_ineligible_frame(self, params):
        low = replace(params, borrower=replace(params.borrower, fico_score=600))
        df = scenario_dataframe(analyze(low))
        assert "at least 620" in df["note"].iloc[0]
        assert df["price_change"].isna().all()
