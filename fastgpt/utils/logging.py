import logging
import sys


def setup_logging(level: int = logging.WARNING):
    """
    Setup logging for the application.

    Calling it again only adjusts the level, so ``--debug`` can raise
    verbosity after import-time setup.
    """
    logger = logging.getLogger("fastgpt")
    logger.setLevel(level)

    # Prevent adding handlers if they already exist
    if not logger.handlers:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        # Console handler
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str):
    """
    Get a logger with the given name under the 'fastgpt' namespace.
    """
    if name == "fastgpt" or name.startswith("fastgpt."):
        return logging.getLogger(name)
    return logging.getLogger(f"fastgpt.{name}")
