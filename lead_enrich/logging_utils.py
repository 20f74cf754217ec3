"""
Logging setup shared by the CLI, the API server and the enrichment modules
"""

import logging
import os
import sys

_DEFAULT_LEVEL = getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)


def setup_logger(name: str, level: int = _DEFAULT_LEVEL) -> logging.Logger:
    """
    Get a named logger that writes to stdout

    Args:
        name: Logger name (usually __name__)
        level: Logging level, defaults to LOG_LEVEL from the environment

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # setup_logger runs at import time in every module; attach one handler only
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def set_level(level: int) -> None:
    """Switch every lead_enrich logger (and its handlers) to a new level."""
    for name, obj in logging.Logger.manager.loggerDict.items():
        if not isinstance(obj, logging.Logger):
            continue
        if name.startswith("lead_enrich") or name in ("__main__", "main", "api_server"):
            obj.setLevel(level)
            for h in obj.handlers:
                h.setLevel(level)
