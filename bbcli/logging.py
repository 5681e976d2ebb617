"""Logging from config and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: non-critical issues and ERROR (default for the CLI)
- INFO: progress messages, WARNING, and ERROR
- DEBUG: git commands, HTTP requests and all levels above

Configure via config.yml (logging.level, logging.format), env
(LOGGING_LEVEL, LOGGING_FORMAT) or the --debug flag. Log records go to
stderr so they never mix with command output.
"""

import logging
import sys

from bbcli.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to WARNING if unknown.
    """
    return LEVELS.get(level.upper().strip(), LEVELS[DEFAULT_LEVEL])


class BbLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig, debug: bool = False) -> None:
        """Store level and format; debug forces DEBUG."""
        self._level = logging.DEBUG if debug else _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            stream=sys.stderr,
            force=True,
        )

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
