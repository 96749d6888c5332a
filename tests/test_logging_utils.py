"""
Tests for the package logger helper.
"""
import logging

from heatmap_kmz.logging_utils import LOG_FORMAT, get_logger


class TestGetLogger:
    """One stream handler per logger, INFO by default."""

    def test_single_handler_on_repeat_calls(self):
        first = get_logger("heatmap_kmz.test_logging")
        second = get_logger("heatmap_kmz.test_logging")
        assert first is second
        assert len(second.handlers) == 1
        assert second.level == logging.INFO
        assert second.handlers[0].formatter._fmt == LOG_FORMAT
