"""Logging configuration for the grocery data core using loguru."""
import sys
from typing import List
from loguru import logger

from grocery.config.settings import GrocerySettings, get_settings


def _log_format(settings: GrocerySettings) -> str:
    if settings.LOG_FORMAT == "detailed":
        return (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> | "
            "<level>{extra}</level>"
        )
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )


def configure_logging(settings: GrocerySettings) -> List[int]:
    """Replace all handlers with the ones the settings ask for.

    The file handler is only added when LOG_FILE is set; its directory is
    created by the settings.

    Returns:
        Ids of the handlers that were added.
    """
    # Remove default handler
    logger.remove()
    log_format = _log_format(settings)

    # Add console handler with color
    handler_ids = [logger.add(
        sys.stderr,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )]

    # Add file handler with rotation
    if settings.LOG_FILE:
        handler_ids.append(logger.add(
            settings.LOG_FILE,
            format=log_format,
            level=settings.LOG_LEVEL,
            rotation=f"{settings.LOG_ROTATION_SIZE_MB} MB",
            retention=f"{settings.LOG_RETENTION_DAYS} days",
            compression="zip",
            serialize=True,
            backtrace=True,
            diagnose=True,
            enqueue=True,  # Thread-safe logging
        ))
    return handler_ids


configure_logging(get_settings())


def get_logger(name: str):
    """Get a logger instance with the given name.

    Args:
        name: The name of the module/component requesting the logger.
            Should be the module's __name__ attribute.

    Returns:
        A logger instance bound with the given name.
    """
    # Ensure module name starts with grocery.
    if not name.startswith("grocery.") and name != "__main__":
        name = f"grocery.{name}"
    return logger.bind(name=name)
