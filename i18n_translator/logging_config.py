import logging
import os
import sys
from logging import Handler

from tqdm import tqdm

LOGGER_NAME = "i18n_translator"


class TqdmLoggingHandler(Handler):
    """
    Logging handler that routes records through tqdm.write so that log lines
    do not tear the per-key progress bar.
    """
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def get_logger(name: str = None) -> logging.Logger:
    """Return the package logger, or a child of it for ``name``."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logger(log_level_str: str, log_file_path: str, log_to_console: bool) -> logging.Logger:
    """
    Set up the logger for the translator.

    Configures the package logger with a file handler and, optionally, a
    tqdm-aware console handler. Child loggers obtained through ``get_logger``
    propagate into it.

    Args:
        log_level_str: The logging level as a string (e.g., 'INFO', 'DEBUG').
        log_file_path: The path to the log file.
        log_to_console: Whether to also log to the console.

    Returns:
        The configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)

    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Re-running setup (e.g. once per CLI invocation in tests) must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.propagate = False

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    # --- File Handler ---
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    # --- End File Handler ---

    # --- Console Handler ---
    if log_to_console:
        tqdm_handler = TqdmLoggingHandler()
        tqdm_handler.setFormatter(formatter)
        logger.addHandler(tqdm_handler)
    # --- End Console Handler ---

    return logger
