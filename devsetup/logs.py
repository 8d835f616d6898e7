"""Run log configuration."""

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "devsetup-run-log"


def setup_logging(log_path: Path, debug: bool = False) -> logging.Handler:
    """Attach the append-only run log to the ``devsetup`` logger.

    Calling it again replaces the previous run log handler, so repeated
    invocations in one process never write duplicate lines.
    """
    logger = logging.getLogger("devsetup")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME or getattr(handler, "_devsetup_debug", False):
            logger.removeHandler(handler)
            handler.close()

    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.set_name(_HANDLER_NAME)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler()
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter("[DEBUG] %(name)s: %(message)s"))
        setattr(console, "_devsetup_debug", True)
        logger.addHandler(console)

    return file_handler


__all__ = ["setup_logging", "LOG_FORMAT", "LOG_DATEFMT"]
