"""Command-line interface for railflow."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from railflow.config import DATASET_CONFIG, DISPLAY_CONFIG
from railflow.io import load_network_files, load_scenario_file
from railflow.logging import configure_cli_logging, get_logger
from railflow.network import RailNetwork
from railflow.types.base import GroupKind, RailRef

logger = get_logger(__name__)

_GROUP_LABELS = {
    GroupKind.DISTRICT: DISPLAY_CONFIG.no_district_label,
    GroupKind.MUNICIPALITY: DISPLAY_CONFIG.no_municipality_label,
    GroupKind.TOWNSHIP: DISPLAY_CONFIG.no_township_label,
}


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string, empty when there are no rows.
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = []
    lines.append(format_row(headers))
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))

    return "\n".join(lines)


def _print_table(title: str, headers: List[str], rows: List[List[str]]) -> None:
    print(title)
    table = _format_table(headers, rows)
    print(table if table else "   (no results)")


def _emit_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _top_count(value: Optional[int]) -> int:
    count = DISPLAY_CONFIG.default_top if value is None else value
    if count < 0:
        raise ValueError(f"Number of rows must be non-negative, got {count}.")
    return count


def _load_network(args: argparse.Namespace) -> RailNetwork:
    if args.scenario is not None:
        logger.info(f"Loading scenario from: {args.scenario}")
        return load_scenario_file(args.scenario)
    stations = args.stations or Path(DATASET_CONFIG.stations_file)
    network = args.network or Path(DATASET_CONFIG.network_file)
    logger.info(f"Loading datasets: {stations}, {network}")
    return load_network_files(stations, network)


def _failed_rails(network: RailNetwork, args: argparse.Namespace) -> List[RailRef]:
    """Rails named with --rail, or a seeded random pick for --random."""
    if args.rail:
        return [(a, b) for a, b in args.rail]
    rails = network.random_rails(args.random, args.seed)
    logger.info(f"Randomly selected rails: {rails}")
    return rails


def _cmd_max_flow(network: RailNetwork, args: argparse.Namespace) -> None:
    value = network.max_flow(args.sources, args.target)
    if args.json:
        _emit_json({"sources": args.sources, "target": args.target, "max_flow": value})
        return
    print(f"Max flow {', '.join(args.sources)} -> {args.target}: {value}")


def _cmd_min_cost(network: RailNetwork, args: argparse.Namespace) -> None:
    result = network.min_cost_max_flow(args.source, args.target)
    if args.json:
        _emit_json(
            {
                "source": args.source,
                "target": args.target,
                "max_flow": result.flow,
                "cost": result.cost,
            }
        )
        return
    print(f"Max flow {args.source} -> {args.target}: {result.flow}")
    print(f"Minimum cost: {result.cost}")


def _cmd_incoming(network: RailNetwork, args: argparse.Namespace) -> None:
    value = network.incoming_flow(args.station)
    if args.json:
        _emit_json({"station": args.station, "incoming_flow": value})
        return
    print(f"Incoming flow at {args.station}: {value}")


def _cmd_top_pairs(network: RailNetwork, args: argparse.Namespace) -> None:
    result = network.all_pairs_max_flow()
    if args.json:
        _emit_json(
            {"max_flow": result.value, "pairs": [list(p) for p in result.pairs]}
        )
        return
    _print_table(
        f"Station pairs with the largest max flow ({result.value}):",
        ["Station A", "Station B"],
        [[a, b] for a, b in result.pairs],
    )


def _cmd_top_groups(network: RailNetwork, args: argparse.Namespace) -> None:
    kind = GroupKind.from_string(args.kind)
    ranking = network.top_groupings(kind)[: _top_count(args.top)]
    if args.json:
        _emit_json(
            {
                "grouping": kind.name.lower(),
                "groups": [
                    {"name": g.name, "average": g.average, "stations": g.size}
                    for g in ranking
                ],
            }
        )
        return
    rows = []
    for rank, group in enumerate(ranking, start=1):
        average = (
            "no data"
            if group.average is None
            else DISPLAY_CONFIG.format_number(group.average)
        )
        rows.append(
            [str(rank), group.name or _GROUP_LABELS[kind], average, str(group.size)]
        )
    _print_table(
        f"Top {kind.name.lower()} groups by average incoming flow:",
        ["Rank", kind.name.capitalize(), "Average", "Stations"],
        rows,
    )


def _cmd_failure(network: RailNetwork, args: argparse.Namespace) -> None:
    rails = _failed_rails(network, args)
    impact = network.failure_impact(rails, args.source, args.target)
    if args.json:
        _emit_json(
            {
                "source": args.source,
                "target": args.target,
                "rails": [list(r) for r in rails],
                "baseline": impact.baseline,
                "degraded": impact.degraded,
                "reduction_pct": impact.reduction_pct,
            }
        )
        return
    print(f"Failed rails: {', '.join(f'{a} - {b}' for a, b in rails) or 'none'}")
    print(f"Max flow {args.source} -> {args.target}: {impact.baseline}")
    print(f"Max flow with failures: {impact.degraded}")
    print(f"Reduction: {DISPLAY_CONFIG.format_number(impact.reduction_pct)}%")


def _cmd_top_reductions(network: RailNetwork, args: argparse.Namespace) -> None:
    rails = _failed_rails(network, args)
    ranking = network.rank_stations_by_degradation(rails)[: _top_count(args.top)]
    if args.json:
        _emit_json(
            {
                "rails": [list(r) for r in rails],
                "stations": [
                    {
                        "station": r.station,
                        "baseline": r.baseline,
                        "degraded": r.degraded,
                        "reduction_pct": r.reduction_pct,
                    }
                    for r in ranking
                ],
            }
        )
        return
    _print_table(
        "Stations most affected by the failures:",
        ["Rank", "Station", "Baseline", "Degraded", "Reduction %"],
        [
            [
                str(rank),
                r.station,
                str(r.baseline),
                str(r.degraded),
                DISPLAY_CONFIG.format_number(r.reduction_pct),
            ]
            for rank, r in enumerate(ranking, start=1)
        ],
    )


_COMMANDS = {
    "max-flow": _cmd_max_flow,
    "min-cost": _cmd_min_cost,
    "incoming": _cmd_incoming,
    "top-pairs": _cmd_top_pairs,
    "top-groups": _cmd_top_groups,
    "failure": _cmd_failure,
    "top-reductions": _cmd_top_reductions,
}


def _add_failure_arguments(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--rail",
        nargs=2,
        action="append",
        metavar=("A", "B"),
        help="Rail to fail, by its two stations (repeatable)",
    )
    group.add_argument(
        "--random", type=int, metavar="N", help="Fail N distinct random rails"
    )
    p.add_argument(
        "--seed", type=int, default=None, help="Seed for --random rail selection"
    )


def _add_top_argument(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-n",
        "--top",
        type=int,
        default=None,
        help=f"Rows to show (default: {DISPLAY_CONFIG.default_top})",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``railflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="railflow",
        description="Analyze train capacity across a railway network.",
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "--stations",
        type=Path,
        default=None,
        help=f"Stations CSV (default: {DATASET_CONFIG.stations_file})",
    )
    parser.add_argument(
        "--network",
        type=Path,
        default=None,
        help=f"Network CSV (default: {DATASET_CONFIG.network_file})",
    )
    parser.add_argument(
        "--scenario",
        type=Path,
        default=None,
        help="Scenario YAML; replaces --stations/--network",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{" + ",".join(_COMMANDS) + "}",
        help="Available commands",
    )

    max_flow_parser = subparsers.add_parser(
        "max-flow", help="Maximum flow from one or more stations to a target"
    )
    max_flow_parser.add_argument("sources", nargs="+", help="Source station(s)")
    max_flow_parser.add_argument(
        "--target", "-t", required=True, help="Target station"
    )

    min_cost_parser = subparsers.add_parser(
        "min-cost", help="Maximum flow between two stations at minimum cost"
    )
    min_cost_parser.add_argument("source", help="Source station")
    min_cost_parser.add_argument("target", help="Target station")

    incoming_parser = subparsers.add_parser(
        "incoming", help="Maximum flow arriving at a station from the line ends"
    )
    incoming_parser.add_argument("station", help="Station name")

    top_pairs_parser = subparsers.add_parser(
        "top-pairs", help="Station pairs with the largest maximum flow"
    )

    top_groups_parser = subparsers.add_parser(
        "top-groups", help="Rank groups by average incoming flow"
    )
    top_groups_parser.add_argument(
        "kind", choices=[k.name.lower() for k in GroupKind], help="Grouping level"
    )
    _add_top_argument(top_groups_parser)

    failure_parser = subparsers.add_parser(
        "failure", help="Maximum flow between two stations with failed rails"
    )
    failure_parser.add_argument("source", help="Source station")
    failure_parser.add_argument("target", help="Target station")
    _add_failure_arguments(failure_parser)

    reductions_parser = subparsers.add_parser(
        "top-reductions", help="Stations most affected by failed rails"
    )
    _add_failure_arguments(reductions_parser)
    _add_top_argument(reductions_parser)

    for p in (
        max_flow_parser,
        min_cost_parser,
        incoming_parser,
        top_pairs_parser,
        top_groups_parser,
        failure_parser,
        reductions_parser,
    ):
        p.add_argument(
            "--json", action="store_true", help="Print results as JSON"
        )

    effective_args = sys.argv[1:] if argv is None else argv

    # If no arguments are provided, show help and exit cleanly
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if configure_cli_logging(args.verbose, args.quiet) == logging.DEBUG:
        logger.debug("Debug logging enabled")

    try:
        network = _load_network(args)
        _COMMANDS[args.command](network, args)
    except FileNotFoundError as e:
        logger.error(str(e))
        print(f"ERROR: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
