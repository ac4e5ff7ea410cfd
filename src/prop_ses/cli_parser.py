"""Parser construction for prop-ses CLI."""

from __future__ import annotations

import argparse
from typing import Any


def build_parser(*, handlers: Any) -> argparse.ArgumentParser:
    _cmd_evaluate = handlers._cmd_evaluate
    _cmd_picks_ls = handlers._cmd_picks_ls
    _cmd_picks_dates = handlers._cmd_picks_dates
    _cmd_config_show = handlers._cmd_config_show
    parser = argparse.ArgumentParser(prog="prop-ses")
    parser.add_argument(
        "--config",
        default="",
        help="Path to runtime config TOML (default: config/runtime.toml).",
    )
    parser.add_argument(
        "--picks-dir",
        default="",
        help="Override picks store dir for this command invocation.",
    )
    parser.add_argument(
        "--log-level",
        default="",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default comes from runtime config.",
    )
    subparsers = parser.add_subparsers(dest="command")

    evaluate = subparsers.add_parser("evaluate", help="Evaluate a batch of propositions")
    evaluate.add_argument(
        "--input",
        required=True,
        help="Proposition records (.json, .jsonl, .csv, .parquet).",
    )
    evaluate.add_argument("--output", default="", help="Write results to .json or .csv.")
    evaluate.add_argument(
        "--combination",
        action="store_true",
        help="Also build the best two-leg combination from approved picks.",
    )
    evaluate.add_argument("--save", action="store_true", help="Upsert results into the store.")
    evaluate.add_argument("--game-date", default="", help="Slate date YYYY-MM-DD (default: ET).")
    evaluate.add_argument("--sport", default="", help="Sport tag for records without one.")
    evaluate.add_argument(
        "--lenient",
        action="store_true",
        help="Skip malformed records instead of failing the batch.",
    )
    evaluate.set_defaults(func=_cmd_evaluate)

    picks = subparsers.add_parser("picks", help="Inspect stored picks")
    picks_subparsers = picks.add_subparsers(dest="picks_command")
    picks_ls = picks_subparsers.add_parser("ls", help="List stored picks for a date")
    picks_ls.add_argument("--game-date", default="", help="Slate date YYYY-MM-DD (default: ET).")
    picks_ls.add_argument(
        "--decision",
        default="",
        choices=["", "bet", "lean", "reject"],
        help="Only show picks with this decision.",
    )
    picks_ls.set_defaults(func=_cmd_picks_ls)
    picks_dates = picks_subparsers.add_parser("dates", help="List dates with stored picks")
    picks_dates.set_defaults(func=_cmd_picks_dates)

    config = subparsers.add_parser("config", help="Inspect effective configuration")
    config_subparsers = config.add_subparsers(dest="config_command")
    config_show = config_subparsers.add_parser("show", help="Print effective configuration")
    config_show.set_defaults(func=_cmd_config_show)

    return parser
