"""
Logging configuration.

Output goes to stderr: stdout carries the MCP stdio protocol and the JSON
printed by the CLI.
"""

import logging
import sys
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure the root logger with a single stderr handler."""
    level_str = (log_level or get_settings().log_level).upper()
    level = getattr(logging, level_str, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)

    # FastMCP logs every request at INFO
    logging.getLogger("mcp.server").setLevel(max(level, logging.WARNING))
