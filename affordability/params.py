"""Parameters and result records for affordability modeling."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from affordability.errors import MissingInputError, OutOfDomainError

FICO_MIN = 300
FICO_MAX = 850

DEFAULT_STATE = "TX"


class LoanType(str, Enum):
    CONVENTIONAL = "conventional"
    FHA = "fha"

    @property
    def label(self) -> str:
        return "Conventional" if self is LoanType.CONVENTIONAL else "FHA"

    @property
    def other(self) -> "LoanType":
        """The alternate loan type, for loan-type comparison scenarios."""
        return LoanType.FHA if self is LoanType.CONVENTIONAL else LoanType.CONVENTIONAL


class MitigatingFactor(str, Enum):
    """Compensating factors that can lift the allowed DTI."""

    RESERVES = "reserves"  # at least 3 months of PITI in the bank
    RESIDUAL_INCOME = "residualIncome"
    HOUSING_HISTORY = "housingHistory"  # 12-24 months of on-time housing payments
    MINIMAL_DEBT = "minimalDebt"


def parse_factors(values: Iterable[str | MitigatingFactor] | None) -> frozenset[MitigatingFactor]:
    """Build a factor set from tags; order and duplicates don't matter."""
    if not values:
        return frozenset()
    return frozenset(MitigatingFactor(v) for v in values)


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise OutOfDomainError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class RateQuote:
    """Unadjusted market base rates (annual %) per loan type.

    Either side may be None when the data source could not supply it.
    """

    conventional: float | None = None
    fha: float | None = None

    def for_loan_type(self, loan_type: LoanType) -> float:
        rate = getattr(self, LoanType(loan_type).value)
        if rate is None:
            raise MissingInputError(f"No base rate available for {LoanType(loan_type).value} loans")
        return rate


@dataclass(frozen=True)
class DebtItems:
    """Monthly recurring debt payments by category."""

    car_loan: float = 0.0
    student_loan: float = 0.0
    credit_card: float = 0.0
    personal_loan: float = 0.0
    other: float = 0.0

    def __post_init__(self) -> None:
        for name in ("car_loan", "student_loan", "credit_card", "personal_loan", "other"):
            value = getattr(self, name)
            _check_finite(name, value)
            if value < 0:
                raise OutOfDomainError(f"{name} cannot be negative, got {value}")

    @property
    def total(self) -> float:
        return self.car_loan + self.student_loan + self.credit_card + self.personal_loan + self.other


@dataclass(frozen=True)
class BorrowerProfile:
    """Who is borrowing: credit, income and existing obligations."""

    fico_score: int = 680
    annual_income: float = 0.0  # gross, per year
    monthly_debts: float = 0.0
    mitigating_factors: frozenset[MitigatingFactor] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not FICO_MIN <= self.fico_score <= FICO_MAX:
            raise OutOfDomainError(
                f"FICO score must be between {FICO_MIN} and {FICO_MAX}, got {self.fico_score}"
            )
        _check_finite("annual_income", self.annual_income)
        _check_finite("monthly_debts", self.monthly_debts)
        if self.annual_income < 0:
            raise OutOfDomainError(f"annual_income cannot be negative, got {self.annual_income}")
        if self.monthly_debts < 0:
            raise OutOfDomainError(f"monthly_debts cannot be negative, got {self.monthly_debts}")
        # accept plain tags from config files
        object.__setattr__(self, "mitigating_factors", parse_factors(self.mitigating_factors))


@dataclass(frozen=True)
class LoanParameters:
    """The loan being priced."""

    loan_type: LoanType = LoanType.CONVENTIONAL
    ltv: float = 80.0  # loan-to-value, % of home price
    term_years: int = 30
    property_tax_rate: float = 0.0  # annual, % of home value
    annual_insurance: float = 0.0  # homeowner's insurance premium, $/yr

    def __post_init__(self) -> None:
        object.__setattr__(self, "loan_type", LoanType(self.loan_type))
        _check_finite("ltv", self.ltv)
        if not 0 <= self.ltv <= 100:
            raise OutOfDomainError(f"LTV must be between 0 and 100, got {self.ltv}")
        if self.term_years <= 0:
            raise OutOfDomainError(f"term_years must be positive, got {self.term_years}")
        _check_finite("property_tax_rate", self.property_tax_rate)
        _check_finite("annual_insurance", self.annual_insurance)
        if self.property_tax_rate < 0:
            raise OutOfDomainError(f"property_tax_rate cannot be negative, got {self.property_tax_rate}")
        if self.annual_insurance < 0:
            raise OutOfDomainError(f"annual_insurance cannot be negative, got {self.annual_insurance}")

    @property
    def down_payment_pct(self) -> float:
        return 100 - self.ltv


@dataclass(frozen=True)
class MipRates:
    upfront_pct: float
    annual_pct: float


@dataclass(frozen=True)
class AffordabilityResult:
    """Outcome of one run of the affordability pipeline."""

    max_home_price: int
    loan_amount: float  # max_home_price * ltv / 100
    down_payment: float
    monthly_payment: int  # PITI + MI, whole dollars
    max_dti: float  # the DTI limit used to size the budget
    adjusted_rate: float
    annual_mi_pct: float
    monthly_mi: float
    payment_dti: float  # back-end DTI of monthly_payment plus debts, %
    upfront_mi: float = 0.0  # FHA upfront MIP, $


class ScenarioDimension(str, Enum):
    LOAN_TYPE = "loan_type"
    FICO = "fico"
    LTV = "ltv"


@dataclass(frozen=True)
class Scenario:
    """A result computed with exactly one input substituted.

    ``result`` is None when the substituted inputs are ineligible or
    unaffordable; ``unavailable_reason`` says why.
    """

    dimension: ScenarioDimension
    loan_type: LoanType
    fico_change: int = 0
    ltv_change: float = 0.0
    result: AffordabilityResult | None = None
    unavailable_reason: str | None = None

    @property
    def available(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class GoalParams:
    """Savings goals toward a better scenario. None targets are suggested."""

    target_fico: int | None = None
    target_down_payment: float | None = None
    current_down_payment: float = 0.0  # cash saved so far
    monthly_expenses: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ScenarioParams:
    """Complete input bundle for an affordability analysis.

    ``rates``, ``loan.property_tax_rate`` and ``loan.annual_insurance`` may be
    left unset in config files; ``config.load_config`` fills them through the
    market data collaborator.
    """

    state: str = DEFAULT_STATE
    borrower: BorrowerProfile = field(default_factory=BorrowerProfile)
    loan: LoanParameters = field(default_factory=LoanParameters)
    rates: RateQuote = field(default_factory=RateQuote)
    goals: GoalParams = field(default_factory=GoalParams)
    market_fallbacks: tuple[str, ...] = ()  # inputs filled from static market defaults
