#!/usr/bin/env python3
"""Invoke celsweep cleanups and validation from workflow engines."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional, Sequence

from celsweep import api
from celsweep.core.options import PruneOptions


def _resolve_cli_path(flag_value: Optional[Path], positional_value: Optional[Path], label: str) -> Path:
    """Choose between positional and flag-supplied paths, enforcing consistency."""
    if flag_value and positional_value and flag_value != positional_value:
        raise SystemExit(
            f"Conflicting {label} values provided (positional='{positional_value}' vs '--{label}={flag_value}')."
        )
    path = flag_value or positional_value
    if path is None:
        raise SystemExit(f"Missing required {label} path. Provide it positionally or with '--{label}'.")
    return path


def _prune(args: argparse.Namespace) -> None:
    scene_path = _resolve_cli_path(getattr(args, "input_flag", None), getattr(args, "input_path", None), "input")
    output_path = getattr(args, "output_flag", None) or getattr(args, "output_path", None)

    options = PruneOptions.from_file(Path(args.config)) if args.config else PruneOptions()
    if args.dedup:
        options.dedup = args.dedup

    result = api.prune_scene(
        scene_path,
        output_path,
        selection=args.select or None,
        adapter=args.adapter,
        options=options,
        dry_run=args.dry_run,
    )

    summary = {
        "adapter": result.adapter,
        "output_path": str(result.output_path) if result.output_path else None,
        **result.cleanup.summary(),
    }
    if args.emit_json:
        print(json.dumps(summary))

    if args.validate_output and result.output_path is not None:
        report = api.validate(result.output_path)
        if args.report_path:
            Path(args.report_path).write_text(report.model_dump_json(indent=2))
        if args.emit_json:
            summary["validation"] = report.model_dump(mode="json")
            print(json.dumps(summary))


def _validate(args: argparse.Namespace) -> None:
    report = api.validate(args.scene)
    if args.emit_json:
        print(report.model_dump_json(indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    prune = subparsers.add_parser("prune", help="Remove unexposed cels from a scene snapshot.")
    prune.add_argument(
        "input_path",
        nargs="?",
        type=Path,
        metavar="input",
        help="Scene snapshot to clean (may also be supplied via '--input').",
    )
    prune.add_argument(
        "output_path",
        nargs="?",
        type=Path,
        metavar="output",
        help="Destination for the cleaned scene; defaults to rewriting the input.",
    )
    prune.add_argument("--input", dest="input_flag", type=Path, help="Scene snapshot to clean.")
    prune.add_argument("--output", dest="output_flag", type=Path, help="Destination for the cleaned scene.")
    prune.add_argument("--select", action="append", help="Node path to process (repeatable).")
    prune.add_argument("--adapter", help="Optional host adapter name to enforce (auto-detect if omitted).")
    prune.add_argument("--dedup", choices=["full", "adjacent"], help="Duplicate column exclusion strategy.")
    prune.add_argument("--config", help="YAML options file.")
    prune.add_argument("--dry-run", action="store_true", help="Plan deletions without writing outputs.")
    prune.add_argument("--validate-output", action="store_true", help="Run validation after cleanup.")
    prune.add_argument("--report-path", help="Write validation report JSON to this path.")
    prune.add_argument("--emit-json", action="store_true", help="Emit machine-readable cleanup/validation summary.")
    prune.set_defaults(func=_prune)

    validate = subparsers.add_parser("validate", help="Validate a scene snapshot.")
    validate.add_argument("scene", type=Path, help="Path to a JSON or YAML scene snapshot.")
    validate.add_argument("--emit-json", action="store_true", help="Emit the validation report as JSON.")
    validate.set_defaults(func=_validate)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
