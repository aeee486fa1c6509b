"""remarkup - fix inline markup that chat pages render incorrectly.

Re-derives canonical inline markup (emphasis, bold, strike, underline,
code, ``$...$`` math) from each message block of a chat page and re-renders
it into corrected HTML in place.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def _setup_logging(log_dir: Path | None = None, *, to_file: bool = True) -> None:
    """Configure logging to the console and, optionally, a rotating file."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if to_file:
        log_dir = log_dir or Path("logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"remarkup.{os.getpid()}.log"

        # File handler - detailed logging with rotation (10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)


def main() -> None:
    """Entry point for the ``remarkup`` command."""
    from remarkup.cli import run
    from remarkup.config import get_settings

    settings = get_settings()
    _setup_logging(settings.app.log_dir, to_file=settings.dev.log_to_file)
    raise SystemExit(run())
