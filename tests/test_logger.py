"""Tests for logger configuration."""
import logging

from storefront.analytics.logger import setup_logger


def test_reconfiguring_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "logs" / "app.log"

    setup_logger("storefront.test", log_file=str(log_file))
    logger = setup_logger("storefront.test", log_file=str(log_file), log_level="debug")

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert log_file.parent.is_dir()


def test_console_only_without_file():
    logger = setup_logger("storefront.test.console", log_file=None)

    assert len(logger.handlers) == 1


def test_http_client_loggers_are_quieted():
    setup_logger("storefront.test.quiet", quiet=("httpx",))

    assert logging.getLogger("httpx").level == logging.WARNING
