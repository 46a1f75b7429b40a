import logging
from typing import Optional, Union
import os
import sys

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    # ANSI color codes
    BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)
    RESET_SEQ = "\033[0m"
    COLOR_SEQ = "\033[1;%dm"

    COLORS = {
        'WARNING': YELLOW,
        'INFO': WHITE,
        'DEBUG': BLUE,
        'CRITICAL': MAGENTA,
        'ERROR': RED
    }

    def __init__(self, msg: str = DEFAULT_FORMAT, use_color: bool = True):
        super().__init__(msg)
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record):
        if not self.use_color or record.levelname not in self.COLORS:
            return super().format(record)
        original = record.levelname
        record.levelname = self.COLOR_SEQ % (30 + self.COLORS[original]) + original + self.RESET_SEQ
        try:
            return super().format(record)
        finally:
            record.levelname = original


def get_logger(
    name: str = "arctracer",
    log_level: Optional[Union[str, int]] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Get a configured logger instance.

    This is the diagnostic sink handed to TrajectoryTracer. Library modules
    log through logging.getLogger(__name__) and inherit these handlers when
    name is a parent of theirs (e.g. "src").

    Args:
        name: Logger name
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            defaults to the LOG_LEVEL environment variable, then INFO
        log_file: Path to log file (optional)

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.environ.get('LOG_LEVEL', 'INFO')
    if isinstance(log_level, str):
        log_level = log_level.upper()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Clear any existing handlers so repeated calls don't duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColoredFormatter(DEFAULT_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(file_handler)

    return logger
