"""Tests for band lookups and band navigation."""

import math

import pytest
from affordability.bands import band_value, next_fico_band, next_ltv_band
from affordability.errors import OutOfDomainError
from affordability.params import LoanType


class TestBandValue:
    BANDS = [(0, "low"), (10, "mid"), (20, "high")]

    def test_lower_bound_is_inclusive(self):
        assert band_value(self.BANDS, 10) == "mid"

    def test_upper_band_is_open(self):
        assert band_value(self.BANDS, 1_000) == "high"

    def test_below_first_band(self):
        with pytest.raises(OutOfDomainError):
            band_value(self.BANDS, -0.1)

    def test_nan_rejected(self):
        with pytest.raises(OutOfDomainError):
            band_value(self.BANDS, math.nan)


class TestNextFicoBand:
    def test_conventional(self):
        assert next_fico_band(700, LoanType.CONVENTIONAL) == 720
        assert next_fico_band(600, LoanType.CONVENTIONAL) == 620
        assert next_fico_band(720, LoanType.CONVENTIONAL) == 740

    def test_top_band(self):
        assert next_fico_band(745, LoanType.CONVENTIONAL) is None
        assert next_fico_band(740, LoanType.FHA) is None

    def test_fha(self):
        assert next_fico_band(550, LoanType.FHA) == 580
        assert next_fico_band(580, LoanType.FHA) == 620

    def test_fha_below_floor(self):
        assert next_fico_band(480, LoanType.FHA) is None


class TestNextLtvBand:
    def test_steps_down(self):
        assert next_ltv_band(92) == 90
        assert next_ltv_band(90) == 85
        assert next_ltv_band(100) == 97
        assert next_ltv_band(96.5) == 95

    def test_floor(self):
        assert next_ltv_band(60) is None
        assert next_ltv_band(55) is None
