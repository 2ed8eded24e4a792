import logging
from pathlib import Path

from gas_contracts.utils.config import config
from gas_contracts.utils.logger import PACKAGE_LOGGER, get_logger


def test_module_loggers_propagate_to_package_handlers():
    logger = get_logger("gas_contracts.sample_module")

    assert logger.handlers == []
    assert logger.propagate
    assert logger.getEffectiveLevel() == logging.getLevelName(config.log_level.upper())


def test_handlers_attached_once():
    get_logger("gas_contracts.one")
    get_logger("gas_contracts.two")
    package = logging.getLogger(PACKAGE_LOGGER)

    file_handlers = [h for h in package.handlers if isinstance(h, logging.FileHandler)]
    assert len(package.handlers) == 2
    assert len(file_handlers) == 1
    assert Path(file_handlers[0].baseFilename).name == config.log_path.name
