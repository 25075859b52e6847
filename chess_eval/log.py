"""
Logging setup for tools and host applications embedding the supervisor.

Library modules only create ``logging.getLogger(__name__)`` loggers; hosts
call ``setup_logging`` once to decide where the output goes.
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the ``chess_eval`` logger.

    Args:
        verbose: If True, log at DEBUG level (includes every engine line);
            otherwise INFO level
        log_file: Optional file receiving the same records, truncated on setup

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("chess_eval")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
