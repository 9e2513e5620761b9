"""YAML/JSON scenario loading and validation."""

import json
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path

import yaml

from affordability.market import MarketDataProvider, MarketDefaults, resolve_market_data
from affordability.params import (
    DEFAULT_STATE,
    BorrowerProfile,
    DebtItems,
    GoalParams,
    LoanParameters,
    RateQuote,
    ScenarioParams,
)

# The reference buyer; used when no config file is given.
DEFAULT_SCENARIO = {
    "state": DEFAULT_STATE,
    "borrower": {
        "fico_score": 700,
        "annual_income": 90_000,
        "monthly_debts": 400,
        "mitigating_factors": [],
    },
    "loan": {
        "loan_type": "conventional",
        "ltv": 80,
        "term_years": 30,
        "property_tax_rate": 1.1,
        "annual_insurance": 1200,
    },
    "rates": {"conventional": 6.5, "fha": 6.25},
    "goals": {"current_down_payment": 20_000, "monthly_expenses": {"living": 3_000}},
}


def _known(cls, data: dict) -> dict:
    """Keep only keys that are fields of ``cls``."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def parse_config_text(text: str, suffix: str = ".yaml") -> dict:
    """Parse YAML or JSON config text into a dict."""
    if suffix == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping at the top level")
    return data


def load_config(path: str | Path, provider: MarketDataProvider | None = None) -> ScenarioParams:
    """Load scenario parameters from a YAML or JSON file."""
    path = Path(path)
    data = parse_config_text(path.read_text(), path.suffix)
    return dict_to_params(data, provider=provider)


def market_defaults_from_dict(data: dict | None) -> MarketDefaults:
    if not data:
        return MarketDefaults()
    base = MarketDefaults()
    overrides = _known(MarketDefaults, data)
    # state tables extend the built-in ones rather than replace them
    for key in ("state_rates", "state_tax_rates", "state_insurance"):
        if key in overrides:
            merged = dict(getattr(base, key))
            merged.update({k.upper(): v for k, v in overrides[key].items()})
            overrides[key] = merged
    return MarketDefaults(**overrides)


def dict_to_params(data: dict, provider: MarketDataProvider | None = None) -> ScenarioParams:
    """Convert a nested dict to ScenarioParams.

    Rates, property tax rate and insurance missing from ``data`` are looked
    up through ``provider`` (falling back to the ``market`` section and the
    built-in state tables). Each filled-in field is listed in
    ``ScenarioParams.market_fallbacks``.
    """
    state = data.get("state", DEFAULT_STATE)
    borrower_data = dict(data.get("borrower") or {})
    loan_data = dict(data.get("loan") or {})
    rates_data = dict(data.get("rates") or {})
    goals_data = dict(data.get("goals") or {})
    defaults = market_defaults_from_dict(data.get("market"))

    # an empty `monthly_expenses:` key in YAML loads as None
    if goals_data.get("monthly_expenses") is None:
        goals_data.pop("monthly_expenses", None)

    # Itemised debts replace a flat monthly_debts figure
    if borrower_data.get("debts"):
        borrower_data["monthly_debts"] = DebtItems(**_known(DebtItems, borrower_data["debts"])).total

    needs_market = (
        rates_data.get("conventional") is None
        or rates_data.get("fha") is None
        or loan_data.get("property_tax_rate") is None
        or loan_data.get("annual_insurance") is None
    )
    fallbacks: list[str] = []
    if needs_market:
        market = resolve_market_data(provider, state, defaults)
        for side in ("conventional", "fha"):
            if rates_data.get(side) is None:
                rates_data[side] = getattr(market.rates, side)
                if f"rates.{side}" in market.fallback_fields:
                    fallbacks.append(f"rates.{side}")
        for key in ("property_tax_rate", "annual_insurance"):
            if loan_data.get(key) is None:
                loan_data[key] = getattr(market, key)
                if key in market.fallback_fields:
                    fallbacks.append(f"loan.{key}")

    borrower = BorrowerProfile(**_known(BorrowerProfile, borrower_data))
    loan = LoanParameters(**_known(LoanParameters, loan_data))
    rates = RateQuote(**_known(RateQuote, rates_data))
    goals = GoalParams(**_known(GoalParams, goals_data))

    return ScenarioParams(
        state=state.strip().upper(),
        borrower=borrower,
        loan=loan,
        rates=rates,
        goals=goals,
        market_fallbacks=tuple(fallbacks),
    )


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(_plain(v) for v in value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def params_to_dict(params: ScenarioParams) -> dict:
    """Convert ScenarioParams to a serialisable dict."""
    d = _plain(asdict(params))
    d.pop("market_fallbacks", None)
    return d
