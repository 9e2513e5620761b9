"""Sensitivity analysis: sweep one input, see how max price changes."""

from dataclasses import dataclass, replace
from enum import Enum

from affordability.errors import AffordabilityError
from affordability.output import fmt
from affordability.params import ScenarioParams
from affordability.scenarios import evaluate


@dataclass
class SweepResult:
    param_value: float
    max_home_price: int | None = None
    monthly_payment: int | None = None
    adjusted_rate: float | None = None
    max_dti: float | None = None
    unavailable_reason: str | None = None


def _replace_nested(obj, path: str, value):
    """Copy of a frozen dataclass with a nested field like 'loan.ltv' replaced."""
    head, _, rest = path.partition(".")
    if not hasattr(obj, head):
        raise ValueError(f"Unknown parameter: {path}")
    if rest:
        return replace(obj, **{head: _replace_nested(getattr(obj, head), rest, value)})
    if isinstance(getattr(obj, head), int) and float(value).is_integer():
        value = int(value)
    return replace(obj, **{head: value})


def _get_nested_attr(obj: object, path: str) -> float:
    for part in path.split("."):
        if not hasattr(obj, part):
            raise ValueError(f"Unknown parameter: {path}")
        obj = getattr(obj, part)
    return obj


def sweep(
    params: ScenarioParams,
    param_path: str,
    values: list[float],
) -> list[SweepResult]:
    """Evaluate the primary result for each value of an input.

    Values the engine rejects (out of range, ineligible, unaffordable) give
    a row with ``unavailable_reason`` set instead of stopping the sweep.
    """
    current = _get_nested_attr(params, param_path)
    if isinstance(current, Enum) or not isinstance(current, (int, float, type(None))):
        raise ValueError(f"{param_path} is not a numeric parameter")
    results = []
    for val in values:
        try:
            p = _replace_nested(params, param_path, val)
            r = evaluate(p.borrower, p.loan, p.rates)
        except AffordabilityError as exc:
            results.append(SweepResult(param_value=val, unavailable_reason=str(exc)))
            continue
        results.append(SweepResult(
            param_value=val,
            max_home_price=r.max_home_price,
            monthly_payment=r.monthly_payment,
            adjusted_rate=r.adjusted_rate,
            max_dti=r.max_dti,
        ))
    return results


def format_sweep(param_path: str, results: list[SweepResult]) -> str:
    """Format sweep results as a table."""
    label = param_path.split(".")[-1]
    header = (
        f"{label:>18} | {'Max Price':>12} | {'Payment':>9} | "
        f"{'Rate':>7} | {'Max DTI':>7}"
    )
    sep = "-" * len(header)
    lines = [f"Sensitivity: {param_path}", header, sep]

    for r in results:
        val_str = f"{r.param_value:g}"
        if r.max_home_price is None:
            lines.append(f"{val_str:>18} | unavailable: {r.unavailable_reason}")
            continue
        lines.append(
            f"{val_str:>18} | {fmt(r.max_home_price):>12} | {fmt(r.monthly_payment):>9} | "
            f"{r.adjusted_rate:>6.3f}% | {r.max_dti:>6g}%"
        )

    return "\n".join(lines)


def frange(start: float, stop: float, step: float) -> list[float]:
    """Generate a list of floats from start to stop (inclusive) by step."""
    if step <= 0:
        raise ValueError("step must be positive")
    values = []
    val = float(start)
    while val <= stop + step / 2:  # tolerance for floating point
        values.append(round(val, 6))
        val += step
    return values
