import logging
import sys
from lifedesk.core.config import get_settings

def setup_logging():
    """Configure logging for the application."""
    settings = get_settings()

    logger = logging.getLogger("lifedesk")
    logger.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(settings.log_level.upper())

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)

    # setup_logging runs once per get_logger call; attach the handler only once
    if not logger.handlers:
        logger.addHandler(handler)

    return logger

def get_logger(name: str):
    """Get a logger instance with the given name."""
    setup_logging()
    return logging.getLogger(f"lifedesk.{name}")
