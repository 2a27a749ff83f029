"""batcher.cli

Command line interface entry point for batcher.

Design constraints:
- argparse-based.
- Lazy imports: do not import httpx/rich at parse time.
- Exit codes: 0 sweep finished (with or without results), 2 usage or configuration error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

EPILOG = "Failed jobs are logged, not retried. Full results land in the CSV record."


@dataclass(frozen=True)
class CliContext:
    repo_root: Path


def _repo_root_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batcher",
        description="Run a parameter sweep of backtests against a remote backtest service.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_plan = sub.add_parser("plan", help="Expand the sweep and print the number of combinations")
    p_plan.add_argument("--config", type=Path, default=None, help="Config file (default: config/default.yaml + user.yaml)")

    p_run = sub.add_parser("run", help="Run the sweep")
    p_run.add_argument("--config", type=Path, default=None, help="Config file (default: config/default.yaml + user.yaml)")
    p_run.add_argument("--parallel", type=int, default=None, help="Max backtests in flight.")
    p_run.add_argument("--api-url", default=None, help="Backtest service base URL.")
    p_run.add_argument(
        "--shuffle",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Randomize job order.",
    )

    return parser


def _print_version() -> None:
    from batcher import __version__

    print(f"batcher v{__version__}")


def _load_config(ctx: CliContext, args: argparse.Namespace):
    from batcher.core.config import Config

    if args.config is not None:
        return Config.from_yaml(args.config)
    return Config.from_repo_defaults(ctx.repo_root)


def _cmd_plan(ctx: CliContext, args: argparse.Namespace) -> int:
    from batcher.core.exceptions import ConfigError
    from batcher.core.logging import setup_logging
    from batcher.sweep.runner import plan

    try:
        config = _load_config(ctx, args)
        setup_logging(config.logging)
        combinations = plan(config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(f"{len(combinations)} combinations")
    return 0


def _cmd_run(ctx: CliContext, args: argparse.Namespace) -> int:
    import asyncio

    from batcher.core.exceptions import ConfigError
    from batcher.core.logging import setup_logging
    from batcher.sweep.runner import run_sweep

    try:
        config = _load_config(ctx, args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    sweep_update: dict[str, object] = {}
    if args.parallel is not None:
        if args.parallel < 1:
            print("error: --parallel must be >= 1", file=sys.stderr)
            return 2
        sweep_update["parallel_queries"] = args.parallel
    if args.shuffle is not None:
        sweep_update["shuffle"] = bool(args.shuffle)
    if sweep_update:
        config = config.model_copy(update={"sweep": config.sweep.model_copy(update=sweep_update)})
    if args.api_url:
        config = config.model_copy(update={"service": config.service.model_copy(update={"api_url": args.api_url})})

    setup_logging(config.logging)

    try:
        asyncio.run(run_sweep(config))
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(repo_root=_repo_root_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "plan": _cmd_plan,
        "run": _cmd_run,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    return int(fn(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
