import sys
from loguru import logger as loguru_logger

from lotkeeper.config.settings_env import settings


def initialize_logger(dev_mode: bool | None = None):
    """Send log records to stderr, at TRACE level in dev mode and INFO otherwise.

    ``dev_mode`` overrides ``settings.DEV_MODE``, for command-line overrides applied after import.
    """
    if dev_mode is None:
        dev_mode = settings.DEV_MODE

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level="TRACE" if dev_mode else "INFO")
    return loguru_logger


logger = initialize_logger()
