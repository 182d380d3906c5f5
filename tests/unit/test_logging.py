"""Tests for logging module."""
import logging

import pytest

import linxpy
from linxpy.core.logging import get_logger


class TestGetLogger:
    """Test suite for get_logger."""

    def test_returns_named_logger(self):
        """Test the logger carries the requested name."""
        logger = get_logger('linxpy.test')

        assert logger.name == 'linxpy.test'
        assert logger is logging.getLogger('linxpy.test')

    def test_propagates_to_root(self):
        """Test records reach the root logger's handlers."""
        logger = get_logger('linxpy.test')

        assert logger.propagate is True

    def test_default_level_without_handlers(self, monkeypatch):
        """Test a WARNING default is applied when root is unconfigured."""
        root = logging.getLogger()
        monkeypatch.setattr(root, 'handlers', [])
        logger = logging.getLogger('linxpy.test.unconfigured')
        logger.setLevel(logging.NOTSET)

        get_logger('linxpy.test.unconfigured')

        assert logger.level == logging.WARNING

    def test_level_left_alone_with_handlers(self, monkeypatch):
        """Test the level is inherited once root has handlers."""
        root = logging.getLogger()
        monkeypatch.setattr(root, 'handlers', [logging.NullHandler()])
        logger = logging.getLogger('linxpy.test.configured')
        logger.setLevel(logging.NOTSET)

        get_logger('linxpy.test.configured')

        assert logger.level == logging.NOTSET


class TestSetupLogging:
    """Test suite for linxpy.setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_levels(self):
        names = ['linxpy', 'linxpy.api', 'linxpy.upload']
        saved = {name: logging.getLogger(name).level for name in names}
        yield
        for name, level in saved.items():
            logging.getLogger(name).setLevel(level)

    def test_sets_level(self):
        """Test package loggers get the requested level."""
        linxpy.setup_logging(logging.DEBUG)

        assert logging.getLogger('linxpy.api').level == logging.DEBUG
        assert logging.getLogger('linxpy.upload').level == logging.DEBUG
