"""Output formatting for affordability results."""

import csv
import io

import pandas as pd

from affordability.goals import GoalPlan
from affordability.params import AffordabilityResult, Scenario, ScenarioDimension, ScenarioParams
from affordability.scenarios import Analysis


def fmt(value: float) -> str:
    """Format a dollar amount."""
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:,.2f}M"
    return f"${value:,.0f}"


def describe(scenario: Scenario) -> str:
    """One-line label for what a scenario changes."""
    if scenario.dimension is ScenarioDimension.LOAN_TYPE:
        return f"Switch to {scenario.loan_type.label}"
    if scenario.dimension is ScenarioDimension.FICO:
        return f"Raise FICO by {scenario.fico_change} points"
    return f"Lower LTV by {abs(scenario.ltv_change):g} points"


def summary_header(params: ScenarioParams) -> str:
    """Generate the header showing key inputs."""
    b = params.borrower
    loan = params.loan
    base_rate = getattr(params.rates, loan.loan_type.value)

    lines = [
        "Mortgage Affordability Estimate",
        "=" * 70,
        "",
        f"  Location:        {params.state}",
        f"  Annual income:   {fmt(b.annual_income)}",
        f"  Monthly debts:   {fmt(b.monthly_debts)}",
        f"  FICO score:      {b.fico_score}",
        f"  Loan type:       {loan.loan_type.label} ({loan.term_years}yr)",
        f"  LTV:             {loan.ltv:g}% (down payment {loan.down_payment_pct:g}%)",
        f"  Base rate:       {base_rate:.3f}%" if base_rate is not None else "  Base rate:       N/A",
        f"  Property tax:    {loan.property_tax_rate:.2f}% of value",
        f"  Insurance:       {fmt(loan.annual_insurance)}/yr",
        "",
    ]

    if b.mitigating_factors:
        factors = ", ".join(sorted(f.value for f in b.mitigating_factors))
        lines.insert(7, f"  Mitigating:      {factors}")

    if params.market_fallbacks:
        lines.append(f"  Note: fallback market data used for {', '.join(params.market_fallbacks)}")
        lines.append("")

    return "\n".join(lines)


def result_table(result: AffordabilityResult) -> str:
    """Key figures for the primary result."""
    lines = [
        f"  Maximum home price:  {fmt(result.max_home_price)}",
        f"  Monthly payment:     {fmt(result.monthly_payment)}",
        f"  Loan amount:         {fmt(result.loan_amount)}",
        f"  Down payment:        {fmt(result.down_payment)}",
        f"  Adjusted rate:       {result.adjusted_rate:.3f}%",
        f"  Max DTI:             {result.max_dti:g}%",
        f"  Payment DTI:         {result.payment_dti:.1f}%",
    ]
    if result.annual_mi_pct:
        lines.append(
            f"  Mortgage insurance:  {fmt(result.monthly_mi)}/mo ({result.annual_mi_pct:.2f}% p.a.)"
        )
    if result.upfront_mi:
        lines.append(f"  Upfront MIP:         {fmt(result.upfront_mi)}")
    return "\n".join(lines)


def scenario_table(scenarios: list[Scenario], base: AffordabilityResult | None) -> str:
    """Compare what-if scenarios against the primary result, if there is one."""
    header = (
        f"{'Scenario':<28} | {'Max Price':>12} | {'Payment':>9} | "
        f"{'Rate':>7} | {'Change':>12}"
    )
    sep = "-" * len(header)
    lines = ["Improvement scenarios:", header, sep]

    for s in scenarios:
        label = describe(s)
        if s.result is None:
            lines.append(f"{label:<28} | {'unavailable: ' + (s.unavailable_reason or ''):<}")
            continue
        r = s.result
        if base is None:
            change_str = "n/a"
        else:
            change = r.max_home_price - base.max_home_price
            change_str = ("+" if change >= 0 else "-") + fmt(abs(change))
        lines.append(
            f"{label:<28} | {fmt(r.max_home_price):>12} | {fmt(r.monthly_payment):>9} | "
            f"{r.adjusted_rate:>6.3f}% | {change_str:>12}"
        )

    return "\n".join(lines)


def primary_section(analysis: Analysis) -> str:
    """Result figures, or why the chosen loan is not available."""
    if analysis.result is not None:
        return result_table(analysis.result)
    return "\n".join([
        f"  Ineligible: {analysis.ineligible_reason}",
        "  The scenarios below show what would qualify.",
    ])


def goal_summary(plan: GoalPlan) -> str:
    lines = ["Goals:"]
    if plan.target_fico is not None:
        lines.append(f"  Target FICO:          {plan.target_fico}")
    if plan.target_down_payment is not None:
        lines.append(
            f"  Target down payment:  {fmt(plan.target_down_payment)} "
            f"(saved {fmt(plan.current_down_payment)})"
        )
        lines.append(f"  Monthly savings:      {fmt(plan.monthly_savings)}")
        if plan.months_to_down_payment is None:
            lines.append("  Not reachable at the current savings rate.")
        else:
            lines.append(f"  Months to goal:       {plan.months_to_down_payment}")
    if len(lines) == 1:
        lines.append("  Already in the best FICO and LTV bands.")
    return "\n".join(lines)


def full_report(analysis: Analysis) -> str:
    """Generate a complete report."""
    parts = [
        summary_header(analysis.params),
        primary_section(analysis),
        "",
        scenario_table(analysis.scenarios, analysis.result),
        "",
        goal_summary(analysis.goals),
    ]
    return "\n".join(parts)


def scenario_rows(analysis: Analysis) -> list[dict]:
    """Primary result and each scenario as flat rows."""
    rows = [_row("Current", analysis.result, analysis.ineligible_reason)]
    for s in analysis.scenarios:
        rows.append(_row(describe(s), s.result, s.unavailable_reason))
    return rows


def _row(label: str, result: AffordabilityResult | None, reason: str | None) -> dict:
    if result is None:
        return {
            "scenario": label,
            "max_home_price": None,
            "loan_amount": None,
            "monthly_payment": None,
            "adjusted_rate": None,
            "max_dti": None,
            "payment_dti": None,
            "monthly_mi": None,
            "note": reason or "",
        }
    return {
        "scenario": label,
        "max_home_price": result.max_home_price,
        "loan_amount": round(result.loan_amount, 2),
        "monthly_payment": result.monthly_payment,
        "adjusted_rate": round(result.adjusted_rate, 4),
        "max_dti": result.max_dti,
        "payment_dti": round(result.payment_dti, 2),
        "monthly_mi": round(result.monthly_mi, 2),
        "note": "",
    }


def to_csv(analysis: Analysis) -> str:
    """Export the result and scenarios to a CSV string."""
    rows = scenario_rows(analysis)
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=list(rows[0]))
    writer.writeheader()
    for row in rows:
        writer.writerow({k: "" if v is None else v for k, v in row.items()})
    return output.getvalue()


def scenario_dataframe(analysis: Analysis) -> pd.DataFrame:
    """Result and scenarios as a DataFrame, one row per scenario."""
    df = pd.DataFrame(scenario_rows(analysis))
    if analysis.result is None:
        df["price_change"] = float("nan")
    else:
        df["price_change"] = df["max_home_price"] - analysis.result.max_home_price
    return df
