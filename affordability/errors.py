"""Error taxonomy for the affordability engine.

The engine never substitutes a numeric default for a missing or invalid
input. It raises one of these and the calling layer decides what to show.
"""


class AffordabilityError(Exception):
    """Base class for every error the engine raises."""


class MissingInputError(AffordabilityError):
    """A required input (e.g. the base rate for a loan type) is absent."""


class IneligibleError(AffordabilityError):
    """The borrower is below the loan type's underwriting floor."""

    def __init__(self, message: str, fico_score: int | None = None, floor: int | None = None):
        super().__init__(message)
        self.fico_score = fico_score
        self.floor = floor


class UnaffordableError(AffordabilityError):
    """The budget cannot cover any positive home price."""

    def __init__(self, message: str, budget: float | None = None):
        super().__init__(message)
        self.budget = budget


class OutOfDomainError(AffordabilityError, ValueError):
    """An input lies outside the range the tables and formulas support."""


class MarketDataError(AffordabilityError):
    """The market data collaborator could not produce a value."""
