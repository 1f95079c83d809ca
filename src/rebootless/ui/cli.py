from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from rebootless import __version__
from rebootless.adapters.ignition import load_snapshot
from rebootless.app import build_engine, plan_update, reconcile_update
from rebootless.config import (
    ConfigurationError,
    configure_logging,
    get_policy_table,
    get_runtime_config,
)
from rebootless.domain.model import Applied, SnapshotError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from rebootless.domain.model import ReconciliationOutcome

log = logging.getLogger(__name__)

EXIT_APPLIED = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_REBOOT_REQUIRED = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Decide whether a node update needs a reboot")
    parser.add_argument(
        "--policy",
        type=Path,
        default=None,
        help="Policy table JSON (defaults to $REBOOTLESS_POLICY_FILE or the built-in table)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Show the decision without touching the node")
    plan.add_argument("old", type=Path, help="Previous configuration document")
    plan.add_argument("new", type=Path, help="Desired configuration document")

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Write the new configuration and run remediation actions",
    )
    reconcile.add_argument("old", type=Path, help="Previous configuration document")
    reconcile.add_argument("new", type=Path, help="Desired configuration document")
    reconcile.add_argument(
        "--root",
        type=Path,
        default=Path("/"),
        help="Filesystem root to write managed files below (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _report(outcome: ReconciliationOutcome) -> int:
    if isinstance(outcome, Applied):
        print(f"no reboot required (drain_required={outcome.plan.drain_required})")  # noqa: T201
        for index, step in enumerate(outcome.plan.steps):
            print(f"  {index}: {step.change.describe()} -> {step.action.describe()}")  # noqa: T201
        return EXIT_APPLIED
    print(  # noqa: T201
        f"reboot required: {outcome.reason} ({outcome.identity or '-'}: {outcome.detail or '-'})"
    )
    return EXIT_REBOOT_REQUIRED


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        policy = get_policy_table(path=parsed_args.policy)
        runtime = get_runtime_config()
        old = load_snapshot(parsed_args.old)
        new = load_snapshot(parsed_args.new)
    except (ConfigurationError, SnapshotError):
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        if parsed_args.command == "plan":
            outcome = plan_update(old, new, engine=build_engine(policy=policy, runtime=runtime))
        elif parsed_args.command == "reconcile":
            outcome = reconcile_update(
                old,
                new,
                engine=build_engine(policy=policy, runtime=runtime, root=parsed_args.root),
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(EXIT_FATAL)

    sys.exit(_report(outcome))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
