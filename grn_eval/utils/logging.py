"""
Logging utilities.

All module loggers are children of the "grn_eval" logger; configure that
one with setup_logger() to control the output of the whole package.
"""

import sys
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional


PACKAGE_LOGGER = "grn_eval"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    log_file: Optional[str] = None,
    level: str = "INFO",
    format_str: Optional[str] = None,
) -> logging.Logger:
    """
    Set up a logger with console and optional file handlers.

    Parameters
    ----------
    name : str
        Logger name, the package logger by default.
    log_file : str, optional
        Also write the messages to this file.
    level : str
        Logging level (DEBUG, INFO, WARNING, ERROR).
    format_str : str, optional
        Log message format.

    Returns
    -------
    logging.Logger
        Configured logger. Handlers of a previous setup are replaced.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = []

    formatter = logging.Formatter(format_str or DEFAULT_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Module logger under the package logger.

    ``get_logger("score")`` and ``get_logger("grn_eval.score")`` return
    the same logger.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


@contextmanager
def log_duration(logger: logging.Logger, task: str) -> Iterator[None]:
    """Log the wall time of a block at debug level."""
    start = datetime.now()
    yield
    logger.debug(f"{task} took {(datetime.now() - start).total_seconds():.2f}s")


class ProgressLogger:
    """
    Progress of the per-network loop of a batch evaluation.

    Parameters
    ----------
    total : int
        Number of networks.
    desc : str
        Description of the task.
    logger : logging.Logger, optional
        Logger to use, the package logger by default.
    log_every : int
        Log every N networks (the last one is always logged).
    """

    def __init__(
        self,
        total: int,
        desc: str = "Processing",
        logger: Optional[logging.Logger] = None,
        log_every: int = 1,
    ):
        self.total = total
        self.desc = desc
        self.logger = logger or get_logger()
        self.log_every = max(1, log_every)
        self.completed: List[str] = []
        self.start_time = datetime.now()

    @property
    def current(self) -> int:
        return len(self.completed)

    @property
    def remaining(self) -> int:
        return self.total - self.current

    def elapsed(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    def update(self, n: int = 1, item: str = ""):
        """Mark n more items as done; ``item`` names the last one."""
        self.completed.extend([item] * n)

        if self.current % self.log_every == 0 or self.current == self.total:
            pct = 100 * self.current / self.total if self.total else 100.0
            suffix = f" [{item}]" if item else ""

            self.logger.info(
                f"{self.desc}: {self.current}/{self.total} ({pct:.1f}%){suffix}"
            )

    def close(self, status: str = "complete"):
        level = logging.INFO if self.remaining == 0 else logging.WARNING
        self.logger.log(
            level,
            f"{self.desc} {status}: {self.current} items in {self.elapsed():.1f}s",
        )
