"""
Logging setup for the Academic Report Engine
"""

import logging
import sys

_logger = logging.getLogger("academic_reports")
if not _logger.handlers:
    _logger.setLevel(logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def get_logger(name=None):
    if name:
        return _logger.getChild(name)
    return _logger


def set_level(level):
    """Apply a level name such as 'DEBUG' or 'WARNING' to the project logger"""
    _logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
