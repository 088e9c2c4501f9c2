from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rae.assignment import build_default_registry, calculate_assignments
from rae.contracts import ValidationError
from rae.core import AssignmentIntegrityError, fair_random, seeded_random, stable_order
from rae.roster import dump_roster, load_roster, roster_messages, roster_to_dicts, sanitize_for_storage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reinforcement assignment engine")
    parser.add_argument("roster", type=Path, nargs="?", help="JSON roster (array or event document with 'characters')")
    parser.add_argument("--algorithm", default="greedy", help="assignment algorithm name")
    order = parser.add_mutually_exclusive_group()
    order.add_argument("--seed", type=int, default=None, help="seed for reproducible tie-breaking")
    order.add_argument("--stable", action="store_true", help="keep roster order for ties instead of shuffling")
    parser.add_argument("--output", type=Path, default=None, help="write result JSON here instead of stdout")
    parser.add_argument("--for-storage", action="store_true", help="strip view-only score fields from the output")
    parser.add_argument("--strict", action="store_true", help="validate the roster and audit the result")
    parser.add_argument("--forensic-dir", type=Path, default=None, help="where strict-mode failures write artifacts")
    parser.add_argument("--export-dir", type=Path, default=None, help="record the run in DuckDB and export CSV/Parquet")
    parser.add_argument("--messages", action="store_true", help="print per-player assignment messages")
    parser.add_argument("--list-algorithms", action="store_true", help="list available algorithms and exit")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.stable:
        random_source = stable_order()
    elif args.seed is not None:
        random_source = seeded_random(args.seed)
    else:
        random_source = fair_random()
    registry = build_default_registry(random_source)

    if args.list_algorithms:
        for info in registry.available():
            print(f"{info.name}: {info.description}")
        return 0
    if args.roster is None:
        print("a roster file is required", file=sys.stderr)
        return 2

    try:
        roster = load_roster(args.roster)
    except (OSError, ValueError, TypeError) as exc:
        print(f"Could not read roster {args.roster}: {exc}", file=sys.stderr)
        return 2

    try:
        result = calculate_assignments(
            roster,
            args.algorithm,
            registry=registry,
            strict=args.strict,
            forensic_dir=args.forensic_dir,
        )
    except ValidationError as exc:
        print(f"Roster rejected: {exc}", file=sys.stderr)
        return 1
    except AssignmentIntegrityError as exc:
        print(f"Assignment audit failed: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        dump_roster(result, args.output, for_storage=args.for_storage)
    elif args.for_storage:
        print(json.dumps(sanitize_for_storage(result), indent=2))
    else:
        print(json.dumps(roster_to_dicts(result), indent=2))

    if args.messages:
        for message in roster_messages(result):
            print()
            print(message)

    if args.export_dir is not None:
        from rae.export import AssignmentExportService

        service = AssignmentExportService(args.export_dir / "assignments.duckdb")
        service.record_run(registry.get(args.algorithm).name, result)
        for path in service.export_runs(args.export_dir):
            print(f"- {path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
