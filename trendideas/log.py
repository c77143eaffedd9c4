"""Console + daily file logging.

Every module logs through a child of the ``trendideas`` logger
(``trendideas.sources.reddit``, ``trendideas.repository``...). Handlers live
on the parent only, so the console stays terse while the daily file under
``LOGS_DIR`` records which component said what.
"""

import logging
import sys
from datetime import datetime

from .config import LOGS_DIR

ROOT_LOGGER = "trendideas"

_configured = False


def _configure(logger: logging.Logger):
    logger.setLevel(logging.DEBUG)
    # Handlers may already be attached when the package is imported twice
    if logger.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("  %(message)s"))
    logger.addHandler(console)

    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOGS_DIR / f"trends_{datetime.now():%Y%m%d}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s [%(name)s] %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(file_handler)


def get_logger(component: str = None) -> logging.Logger:
    """The package logger, or its child for ``component`` (e.g. "sources.reddit")."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    if not _configured:
        _configure(root)
        _configured = True
    return root.getChild(component) if component else root


def set_verbose(verbose: bool = True):
    """Show DEBUG records from every component on the console."""
    for handler in get_logger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.DEBUG if verbose else logging.INFO)


def log(msg: str):
    get_logger().info(msg)
