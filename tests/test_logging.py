import logging

from loguru import logger

from community_moderation.core.logging import configure_logging


def test_configure_logging_sets_intercept_handler():
    configure_logging("INFO")
    assert logging.root.handlers, "expected root handlers to be configured"
    handler = logging.root.handlers[0]
    assert handler.__class__.__name__ == "_InterceptHandler"
    assert logging.root.level == logging.INFO


def test_stdlib_records_reach_loguru():
    configure_logging("DEBUG")
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        logging.getLogger("uvicorn.error").warning("server warming up")
    finally:
        logger.remove(sink_id)
    assert any("server warming up" in str(message) for message in messages)
