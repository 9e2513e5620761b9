"""CLI entry point for the mortgage affordability engine."""

import argparse
import copy
import logging
import sys
from pathlib import Path

import yaml

from affordability.config import DEFAULT_SCENARIO, dict_to_params, parse_config_text
from affordability.errors import AffordabilityError
from affordability.output import full_report, primary_section, scenario_table, summary_header, to_csv
from affordability.params import ScenarioParams
from affordability.scenarios import analyze
from affordability.sensitivity import format_sweep, frange, sweep

logger = logging.getLogger(__name__)


def _load(args: argparse.Namespace) -> ScenarioParams:
    """Scenario from the config file (or the defaults), with CLI overrides."""
    if args.config:
        path = Path(args.config)
        data = parse_config_text(path.read_text(), path.suffix)
        logger.info("Loaded config from %s", path)
    else:
        data = copy.deepcopy(DEFAULT_SCENARIO)
    if getattr(args, "state", None):
        data["state"] = args.state
        # re-resolve regional inputs for the new state
        data.setdefault("loan", {})
        for key in ("property_tax_rate", "annual_insurance"):
            data["loan"].pop(key, None)
        data.pop("rates", None)
    return dict_to_params(data)


def cmd_run(args: argparse.Namespace) -> None:
    """Compute max price, scenarios and goals."""
    analysis = analyze(_load(args))
    if args.csv:
        print(to_csv(analysis), end="")
    else:
        print(full_report(analysis))


def cmd_scenarios(args: argparse.Namespace) -> None:
    """Show only the what-if comparison."""
    analysis = analyze(_load(args))
    print(summary_header(analysis.params))
    print(primary_section(analysis))
    print()
    print(scenario_table(analysis.scenarios, analysis.result))


def cmd_sensitivity(args: argparse.Namespace) -> None:
    """Sweep one input over a range."""
    params = _load(args)

    parts = args.range.split(",")
    if len(parts) != 3:
        raise ValueError("--range must be start,stop,step (e.g., 640,760,20)")

    start, stop, step = float(parts[0]), float(parts[1]), float(parts[2])
    results = sweep(params, args.param, frange(start, stop, step))
    print(format_sweep(args.param, results))


def cmd_defaults(args: argparse.Namespace) -> None:
    """Print the default scenario as YAML."""
    print(yaml.dump(DEFAULT_SCENARIO, default_flow_style=False, sort_keys=False), end="")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mortgage affordability: maximum home price and how to improve it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  affordability run                          # Run with defaults
  affordability run buyer.yaml               # Run with custom config
  affordability run buyer.yaml --csv         # CSV output
  affordability run buyer.yaml --state FL    # Regional inputs for Florida
  affordability scenarios buyer.yaml         # What-if comparison only
  affordability sensitivity --param borrower.fico_score --range 620,760,20
  affordability defaults                     # Print default config
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress and market fallbacks")

    subparsers = parser.add_subparsers(dest="command")

    # run
    run_parser = subparsers.add_parser("run", help="Compute maximum home price")
    run_parser.add_argument("config", nargs="?", help="YAML/JSON config file")
    run_parser.add_argument("--csv", action="store_true", help="Output as CSV")
    run_parser.add_argument("--state", help="Two-letter state code; looks up rates, tax and insurance")

    # scenarios
    sc_parser = subparsers.add_parser("scenarios", help="Compare improvement scenarios")
    sc_parser.add_argument("config", nargs="?", help="YAML/JSON config file")
    sc_parser.add_argument("--state", help="Two-letter state code")

    # sensitivity
    sens_parser = subparsers.add_parser("sensitivity", help="Parameter sensitivity analysis")
    sens_parser.add_argument("--config", help="Base config file")
    sens_parser.add_argument("--param", required=True, help="Parameter path (e.g., loan.ltv)")
    sens_parser.add_argument("--range", required=True, help="start,stop,step (e.g., 70,95,5)")

    # defaults
    subparsers.add_parser("defaults", help="Print default parameters")

    return parser


COMMANDS = {
    "run": cmd_run,
    "scenarios": cmd_scenarios,
    "sensitivity": cmd_sensitivity,
    "defaults": cmd_defaults,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except (AffordabilityError, ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
