"""Tests for bbcli.logging (BbLogging, level/format from config)."""

import logging

from bbcli.config import LoggingConfig
from bbcli.logging import (
    DEFAULT_FORMAT,
    DEFAULT_LEVEL,
    LEVELS,
    BbLogging,
    _resolve_level,
)


class TestConstants:
    """Module constants and level mapping."""

    def test_levels_has_four_standard_levels(self) -> None:
        """LEVELS maps DEBUG, INFO, WARNING, ERROR to logging constants."""
        assert LEVELS == {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
        }

    def test_default_format_contains_placeholders(self) -> None:
        assert "%(levelname)s" in DEFAULT_FORMAT
        assert "%(message)s" in DEFAULT_FORMAT

    def test_default_level_is_warning(self) -> None:
        """The CLI stays quiet unless asked."""
        assert DEFAULT_LEVEL == "WARNING"


class TestResolveLevel:
    """_resolve_level maps level names to logging constants."""

    def test_known_levels(self) -> None:
        assert _resolve_level("DEBUG") == logging.DEBUG
        assert _resolve_level("INFO") == logging.INFO
        assert _resolve_level("WARNING") == logging.WARNING
        assert _resolve_level("ERROR") == logging.ERROR

    def test_lowercase_and_whitespace_normalized(self) -> None:
        assert _resolve_level("debug") == logging.DEBUG
        assert _resolve_level("  info\t") == logging.INFO

    def test_unknown_level_returns_warning(self) -> None:
        """Unknown level name falls back to WARNING."""
        assert _resolve_level("TRACE") == logging.WARNING
        assert _resolve_level("") == logging.WARNING


class TestBbLogging:
    """BbLogging applies LoggingConfig (level + format) to the root logger."""

    def test_setup_sets_root_level_from_config(self) -> None:
        for level_name, expected_num in LEVELS.items():
            cfg = LoggingConfig(level=level_name, format="%(message)s")
            BbLogging(cfg).setup()
            assert logging.root.level == expected_num

    def test_debug_flag_overrides_config_level(self) -> None:
        """--debug forces DEBUG whatever the config says."""
        cfg = LoggingConfig(level="ERROR", format="%(message)s")
        BbLogging(cfg, debug=True).setup()
        assert logging.root.level == logging.DEBUG

    def test_setup_applies_format(self) -> None:
        custom = "%(levelname)s || %(message)s"
        BbLogging(LoggingConfig(level="INFO", format=custom)).setup()
        handler = logging.root.handlers[0]
        assert handler.formatter is not None
        assert handler.formatter._fmt == custom

    def test_empty_format_uses_default(self) -> None:
        BbLogging(LoggingConfig(level="INFO", format="")).setup()
        fmt = logging.root.handlers[0].formatter
        assert fmt is not None
        assert fmt._fmt == DEFAULT_FORMAT

    def test_get_logger_returns_named_logger(self) -> None:
        log = BbLogging(LoggingConfig(level="DEBUG", format="%(message)s")).get_logger("bbcli.test")
        assert log.name == "bbcli.test"
