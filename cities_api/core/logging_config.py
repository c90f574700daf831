"""Logging configuration for the application.

``setup_logging`` configures the root logger once with a console handler.
Modules log through ``logging.getLogger(__name__)``.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger.

    If the root logger already has handlers (uvicorn, pytest), only the
    level is applied.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if logger.handlers:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
