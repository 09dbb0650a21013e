"""Tests for settings and structured logging."""

import json
import logging

import pytest

from pantryparse.config import Settings
from pantryparse.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    clear_context,
    configure_logging,
    get_logger,
    locale_ctx,
    set_context,
    utterance_id_ctx,
)


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging side effects on the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in ("pantryparse", "pantryparse.parse", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def make_record(message: str) -> logging.LogRecord:
    return logging.LogRecord("pantryparse.test", logging.INFO, __file__, 1, message, None, None)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        monkeypatch.delenv("PANTRYPARSE_DEFAULT_LOCALE", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_locale == "en"
        assert settings.classifier_max_retries == 3
        assert settings.is_development

    def test_environment_override(self, monkeypatch):
        """Test prefixed environment variables override defaults."""
        monkeypatch.setenv("PANTRYPARSE_DEFAULT_LOCALE", "zh-Hans")
        monkeypatch.setenv("PANTRYPARSE_ENVIRONMENT", "production")
        settings = Settings(_env_file=None)
        assert settings.default_locale == "zh-Hans"
        assert not settings.is_development

    def test_classify_url(self):
        """Test the endpoint is built without a doubled slash."""
        settings = Settings(_env_file=None, classifier_base_url="https://classifier.test/api/")
        assert settings.classify_url == "https://classifier.test/api/classify"


class TestLoggingContext:
    """Tests for per-utterance context variables."""

    def test_context_set_and_reset(self):
        """Test values are visible inside the block only."""
        with LoggingContext(utterance_id="utt-1", locale="en"):
            assert utterance_id_ctx.get() == "utt-1"
            assert locale_ctx.get() == "en"
        assert utterance_id_ctx.get() is None
        assert locale_ctx.get() is None

    def test_nested_contexts(self):
        """Test an inner context restores the outer values."""
        with LoggingContext(utterance_id="outer"):
            with LoggingContext(utterance_id="inner"):
                assert utterance_id_ctx.get() == "inner"
            assert utterance_id_ctx.get() == "outer"

    def test_set_and_clear(self):
        """Test the imperative helpers."""
        set_context(locale="zh-Hans")
        assert locale_ctx.get() == "zh-Hans"
        clear_context()
        assert locale_ctx.get() is None

    def test_adapter_adds_context(self, caplog):
        """Test log records carry the current context."""
        logger = get_logger("pantryparse.test")
        with caplog.at_level(logging.INFO, logger="pantryparse.test"):
            with LoggingContext(utterance_id="utt-2"):
                logger.info("hello")
        assert caplog.records[-1].utterance_id == "utt-2"


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_formatter(self):
        """Test JSON output includes the message and context."""
        with LoggingContext(utterance_id="utt-3", locale="en"):
            payload = json.loads(StructuredJsonFormatter().format(make_record("parsed 2 items")))
        assert payload["message"] == "parsed 2 items"
        assert payload["level"] == "INFO"
        assert payload["utterance_id"] == "utt-3"
        assert payload["locale"] == "en"

    def test_json_formatter_keeps_chinese(self):
        """Test Chinese text is not escaped."""
        payload = StructuredJsonFormatter().format(make_record("牛奶"))
        assert "牛奶" in payload

    def test_contextual_formatter(self):
        """Test the development format shows a short context."""
        with LoggingContext(utterance_id="abcdefgh-1234", locale="zh-Hans"):
            line = ContextualFormatter().format(make_record("hello"))
        assert "utt=abcdefgh" in line
        assert "locale=zh-Hans" in line
        assert line.endswith("| hello")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_handler(self, restore_root_logger):
        """Test JSON format installs a single JSON handler."""
        configure_logging(log_level="DEBUG", json_format=True)
        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, StructuredJsonFormatter)
        assert logging.getLogger("pantryparse").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_text_handler(self, restore_root_logger):
        """Test text format installs the contextual formatter."""
        configure_logging(log_level="WARNING", json_format=False)
        assert isinstance(restore_root_logger.handlers[0].formatter, ContextualFormatter)
        assert restore_root_logger.level == logging.WARNING


class TestParserLogging:
    """Tests for logging around a parse."""

    @pytest.mark.asyncio
    async def test_parse_logs_with_locale(self, table_parser, now, caplog):
        """Test parse logs carry the utterance locale and an id."""
        with caplog.at_level(logging.INFO, logger="pantryparse"):
            await table_parser.parse("两斤牛肉", now=now)

        records = [r for r in caplog.records if r.name == "pantryparse.pipeline"]
        assert records
        assert records[-1].locale == "zh-Hans"
        assert records[-1].utterance_id
