"""CLI entrypoint for prop-ses."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from prop_ses.cli_parser import build_parser as _build_parser_impl
from prop_ses.engine import build_combination, evaluate, summarize_results
from prop_ses.engine_config import EngineConfig
from prop_ses.errors import CLIError, PropSesError
from prop_ses.prop_io import load_propositions, write_results
from prop_ses.runtime_config import (
    RuntimeConfig,
    load_runtime_config,
    set_current_runtime_config,
)
from prop_ses.settings import Settings
from prop_ses.storage import PicksStore
from prop_ses.time_utils import et_today_str, parse_game_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandContext:
    runtime: RuntimeConfig
    settings: Settings
    engine: EngineConfig
    picks_dir: Path


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, sort_keys=True, ensure_ascii=True, indent=2))


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.strip().upper() or "WARNING")
    if not isinstance(level, int):
        raise CLIError(f"invalid log level: {level_name}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _context(args: argparse.Namespace) -> CommandContext:
    config_path = Path(args.config).expanduser() if args.config else None
    runtime = load_runtime_config(config_path)
    set_current_runtime_config(runtime)
    settings = Settings.from_runtime()
    _configure_logging(args.log_level or settings.log_level)
    engine = runtime.engine.with_overrides(
        bet_threshold=settings.bet_threshold,
        lean_threshold=settings.lean_threshold,
        combination_min_score=settings.combination_min_score,
    )
    picks_dir = Path(args.picks_dir).expanduser() if args.picks_dir else Path(settings.picks_dir)
    return CommandContext(runtime=runtime, settings=settings, engine=engine, picks_dir=picks_dir)


def _resolve_game_date(raw: str) -> str:
    return parse_game_date(raw) if raw.strip() else et_today_str()


def _cmd_evaluate(args: argparse.Namespace) -> int:
    ctx = _context(args)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"input not found: {input_path}")
    props, warnings = load_propositions(input_path, strict=not args.lenient)
    default_sport = args.sport.strip() or ctx.settings.default_sport
    props = [
        prop if prop.sport or prop.game_context is not None else replace(prop, sport=default_sport)
        for prop in props
    ]

    results = evaluate(props, config=ctx.engine)
    report: dict[str, Any] = {
        "summary": summarize_results(results),
        "results": [result.to_row() for result in results],
        "warnings": warnings,
    }
    if args.combination:
        report["combination"] = build_combination(results, config=ctx.engine).to_dict()
    if args.output:
        report["output_path"] = str(write_results(Path(args.output).expanduser(), results))
    if args.save:
        game_date = _resolve_game_date(args.game_date)
        store = PicksStore(ctx.picks_dir)
        report["saved"] = {
            "game_date": game_date,
            "count": store.upsert(results, game_date=game_date),
            "path": str(store.day_path(game_date)),
        }
    for warning in warnings:
        logger.warning("skipped row %s: %s", warning["row"], warning["error"])
    _print_json(report)
    return 0


def _cmd_picks_ls(args: argparse.Namespace) -> int:
    ctx = _context(args)
    game_date = _resolve_game_date(args.game_date)
    picks = PicksStore(ctx.picks_dir).list_picks(game_date)
    if args.decision:
        picks = [row for row in picks if row.get("decision") == args.decision]
    if not picks:
        print(f"no picks for {game_date}")
        return 0
    _print_json({"game_date": game_date, "count": len(picks), "picks": picks})
    return 0


def _cmd_picks_dates(args: argparse.Namespace) -> int:
    ctx = _context(args)
    dates = PicksStore(ctx.picks_dir).list_dates()
    if not dates:
        print("no picks")
        return 0
    for game_date in dates:
        print(game_date)
    return 0


def _cmd_config_show(args: argparse.Namespace) -> int:
    ctx = _context(args)
    _print_json(
        {
            "config_path": str(ctx.runtime.config_path),
            "picks_dir": str(ctx.picks_dir),
            "default_sport": ctx.settings.default_sport,
            "log_level": ctx.settings.log_level,
            "engine": ctx.engine.as_dict(),
        }
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    return _build_parser_impl(handlers=sys.modules[__name__])


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        return int(func(args))
    except (PropSesError, FileNotFoundError, ValueError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
