# src/gas_contracts/utils/logger.py
"""
Package logging: one file handler and one console handler, attached to the
`gas_contracts` logger. Module loggers propagate to it.

Settings (LOG_DIR, LOG_FILE, LOG_LEVEL, CONSOLE_LOG_LEVEL) come from AppConfig.
"""
import logging

from gas_contracts.utils.config import config

PACKAGE_LOGGER = "gas_contracts"

formatter = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)


def _build_handlers():
    log_path = config.log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(config.log_level.upper())
    file_handler.setFormatter(formatter)

    # Console only shows warnings so CLI report text stays readable
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.console_log_level.upper())
    console_handler.setFormatter(formatter)

    return [file_handler, console_handler]


def _configure(logger: logging.Logger) -> None:
    logger.setLevel(config.log_level.upper())
    if not logger.handlers:
        for handler in _build_handlers():
            logger.addHandler(handler)


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger wired to the package handlers."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        _configure(logging.getLogger(PACKAGE_LOGGER))
        return logging.getLogger(name)

    # Scripts run as __main__ get their own handlers
    logger = logging.getLogger(name)
    _configure(logger)
    return logger
