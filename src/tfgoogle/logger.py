import logging
import os
import sys
import traceback

from colorlog import ColoredFormatter

from tfgoogle import constants as CONSTANTS

LOGGER_NAME = "tfgoogle"


def setup_logger(debug_mode=False):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Create colored formatter
    formatter = ColoredFormatter(
        "%(log_color)s[%(levelname)s] %(message)s",
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "red,bg_white",
        }
    )

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    return logger


def get_debug_mode(env=None):
    env = os.environ if env is None else env
    return env.get(CONSTANTS.TF_LOG_ENV_VAR, "").upper() in ("DEBUG", "TRACE")


def print_stack_trace():
    """Log the current exception's stack trace when debug logging is active."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(traceback.format_exc())


# Logger defaults to INFO unless reconfigured later.
DEBUG_MODE = False
logger = setup_logger(debug_mode=DEBUG_MODE)


def configure_logger_from_env(env=None):
    """
    Re-setup the logger from TF_LOG, the way Terraform selects provider log levels.

    Args:
        env: Mapping to read instead of os.environ (used by tests)
    """
    global logger, DEBUG_MODE
    DEBUG_MODE = get_debug_mode(env)
    logger = setup_logger(debug_mode=DEBUG_MODE)
    if DEBUG_MODE:
        logger.debug("Debug mode is active.")
    return logger
