import logging
import sys

from .config import LOG_LEVEL

LOGGER_NAME = "swiftbank_firestoredb"


def configure_logger(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Configure the package logger: INFO and DEBUG to stdout, WARNING and above to stderr.

    Safe to call more than once; handlers are only attached the first time.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)

    if not package_logger.handlers:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
        stdout_handler.setFormatter(formatter)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.WARNING)
        stderr_handler.setFormatter(formatter)

        package_logger.addHandler(stdout_handler)
        package_logger.addHandler(stderr_handler)

    return package_logger


logger = configure_logger()
