"""Root logger setup for the CLI and the node daemon."""

from __future__ import annotations

import logging
import os
from typing import Final

CONSOLE_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# journald stamps every line itself
JOURNAL_FORMAT: Final[str] = "%(levelname)s [%(name)s] %(message)s"


def running_under_journal() -> bool:
    return bool(os.getenv("JOURNAL_STREAM"))


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Configure the root logger at INFO, or DEBUG when ``verbose``.

    ``force=True`` replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=JOURNAL_FORMAT if running_under_journal() else CONSOLE_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
