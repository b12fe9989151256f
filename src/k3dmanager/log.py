"""Logging setup"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(level: str = "info", verbose: bool = False) -> logging.Logger:
    """Route k3dmanager log records to stderr through rich."""
    logger = logging.getLogger("k3dmanager")
    logger.setLevel(logging.DEBUG if verbose else LEVELS.get(level, logging.INFO))

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
