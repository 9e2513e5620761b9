"""Market inputs: base rates, property tax and insurance by region.

The engine never looks these up itself. A ``MarketDataProvider`` supplies
them for a two-letter state code; ``resolve_market_data`` fills anything the
provider can't supply from ``MarketDefaults`` and records which fields fell
back so the caller can show it.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from affordability.errors import MarketDataError
from affordability.params import RateQuote

logger = logging.getLogger(__name__)

# Static fallbacks by state. Rates in % p.a., tax in % of value, insurance in $/yr.
STATE_RATES = {
    "CA": 6.8, "NY": 6.85, "TX": 6.7, "FL": 6.65, "IL": 6.73,
    "PA": 6.78, "OH": 6.69, "GA": 6.72, "NC": 6.67, "MI": 6.71,
}
STATE_TAX_RATES = {
    "CA": 0.76, "NY": 1.72, "TX": 1.8, "FL": 0.89, "IL": 2.27,
    "PA": 1.58, "OH": 1.62, "GA": 0.92, "NC": 0.84, "MI": 1.54,
}
STATE_INSURANCE = {
    "CA": 1450, "NY": 1350, "TX": 1850, "FL": 1950, "IL": 1150,
    "PA": 1050, "OH": 950, "GA": 1250, "NC": 1150, "MI": 1050,
}


@dataclass(frozen=True)
class MarketDefaults:
    """Fallback market values used when the provider has no answer."""

    rate: float = 6.75
    property_tax_rate: float = 1.07
    annual_insurance: float = 1200.0
    state_rates: dict[str, float] = field(default_factory=lambda: dict(STATE_RATES))
    state_tax_rates: dict[str, float] = field(default_factory=lambda: dict(STATE_TAX_RATES))
    state_insurance: dict[str, float] = field(default_factory=lambda: dict(STATE_INSURANCE))

    def rate_for(self, state: str) -> float:
        return self.state_rates.get(state, self.rate)

    def tax_rate_for(self, state: str) -> float:
        return self.state_tax_rates.get(state, self.property_tax_rate)

    def insurance_for(self, state: str) -> float:
        return self.state_insurance.get(state, self.annual_insurance)


@dataclass(frozen=True)
class MarketSnapshot:
    rates: RateQuote
    property_tax_rate: float | None
    annual_insurance: float | None
    fallback_fields: tuple[str, ...] = ()  # fields filled from defaults

    @property
    def used_fallback(self) -> bool:
        return bool(self.fallback_fields)


class MarketDataProvider(Protocol):
    def lookup(self, state: str) -> MarketSnapshot:
        """Return market values for the state; fields may be None.

        Implementations should answer within a bounded time and raise
        MarketDataError rather than block.
        """
        ...


class StaticMarketData:
    """Provider backed by the static tables in ``MarketDefaults``."""

    def __init__(self, defaults: MarketDefaults | None = None) -> None:
        self.defaults = defaults or MarketDefaults()

    def lookup(self, state: str) -> MarketSnapshot:
        state = normalize_state(state)
        rate = self.defaults.rate_for(state)
        return MarketSnapshot(
            rates=RateQuote(conventional=rate, fha=rate),
            property_tax_rate=self.defaults.tax_rate_for(state),
            annual_insurance=self.defaults.insurance_for(state),
        )


def normalize_state(code: str) -> str:
    """Validate and upper-case a two-letter state/region code."""
    code = (code or "").strip().upper()
    if len(code) != 2 or not code.isalpha():
        raise ValueError(f"Expected a two-letter state code, got {code!r}")
    return code


def resolve_market_data(
    provider: MarketDataProvider | None,
    state: str,
    defaults: MarketDefaults | None = None,
) -> MarketSnapshot:
    """Ask the provider for market data and fill gaps from the defaults.

    Every field taken from the defaults is listed in ``fallback_fields`` and
    logged at WARNING.
    """
    state = normalize_state(state)
    defaults = defaults or MarketDefaults()

    snapshot = None
    if provider is not None:
        try:
            snapshot = provider.lookup(state)
        except MarketDataError as exc:
            logger.warning("Market data lookup failed for %s: %s", state, exc)

    if snapshot is None:
        snapshot = MarketSnapshot(rates=RateQuote(), property_tax_rate=None, annual_insurance=None)

    fallback = []
    conventional = snapshot.rates.conventional
    if conventional is None:
        conventional = defaults.rate_for(state)
        fallback.append("rates.conventional")
    fha = snapshot.rates.fha
    if fha is None:
        fha = defaults.rate_for(state)
        fallback.append("rates.fha")
    tax_rate = snapshot.property_tax_rate
    if tax_rate is None:
        tax_rate = defaults.tax_rate_for(state)
        fallback.append("property_tax_rate")
    insurance = snapshot.annual_insurance
    if insurance is None:
        insurance = defaults.insurance_for(state)
        fallback.append("annual_insurance")

    if fallback:
        logger.warning("Using fallback market data for %s: %s", state, ", ".join(fallback))

    return MarketSnapshot(
        rates=RateQuote(conventional=conventional, fha=fha),
        property_tax_rate=tax_rate,
        annual_insurance=insurance,
        fallback_fields=tuple(snapshot.fallback_fields) + tuple(fallback),
    )
