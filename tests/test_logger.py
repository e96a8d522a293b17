import logging

from trade_preview.utils.logger import get_logger


def test_get_logger_returns_named_logger():
    logger = get_logger("trade_preview.tests")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "trade_preview.tests"
    assert get_logger("trade_preview.tests") is logger


def test_repeated_calls_do_not_add_root_handlers():
    get_logger()
    count = len(logging.getLogger().handlers)
    get_logger("trade_preview.other")
    assert len(logging.getLogger().handlers) == count
