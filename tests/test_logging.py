"""Tests for verbose logging toggles."""

import io
import logging

import pytest

from fluent_introspect import (
    ConfigurationError,
    Introspect,
    disable_verbose,
    enable_verbose,
    is_verbose,
    verbose,
)

ROOT = logging.getLogger("fluent_introspect")


def stream_handlers():
    return [h for h in ROOT.handlers if not isinstance(h, logging.NullHandler)]


class TestVerboseLogging:
    def teardown_method(self):
        disable_verbose()

    def test_silent_by_default(self):
        assert stream_handlers() == []
        assert any(isinstance(h, logging.NullHandler) for h in ROOT.handlers)

    def test_enable_adds_one_handler(self):
        enable_verbose("DEBUG")
        enable_verbose("debug")
        assert len(stream_handlers()) == 1
        assert ROOT.level == logging.DEBUG

    def test_custom_format(self):
        enable_verbose("INFO", format="%(message)s")
        assert stream_handlers()[0].formatter._fmt == "%(message)s"

    def test_disable_removes_handler(self):
        enable_verbose()
        disable_verbose()
        assert stream_handlers() == []
        assert ROOT.level == logging.WARNING

    def test_stream_and_is_verbose(self):
        stream = io.StringIO()
        assert not is_verbose()
        enable_verbose("INFO", format="%(message)s", stream=stream)
        assert is_verbose()
        logging.getLogger("fluent_introspect.query").info("scanning")
        assert stream.getvalue() == "scanning\n"

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError, match="Unknown log level"):
            enable_verbose("LOUD")
        assert not is_verbose()

    def test_context_manager(self):
        with verbose("DEBUG"):
            assert is_verbose()
            assert ROOT.level == logging.DEBUG
        assert not is_verbose()

    def test_degraded_lookup_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fluent_introspect"):
            assert Introspect.classes(["sample_app"]).where(
                lambda cls: cls.missing_attribute, "broken"
            ).get() == []
        assert "Filter broken failed" in caplog.text
