import logging

import pytest

from core.utils.logger import get_tool_output_logger

_OWN_HANDLER_TYPES = (logging.StreamHandler, logging.FileHandler, logging.NullHandler)


@pytest.fixture
def isolated_logging():
    """Restore root and tool-output logger state after setup_logging runs."""
    loggers = [logging.getLogger(), get_tool_output_logger()]
    saved = {
        logger.name: (logger.level, logger.propagate, list(logger.handlers))
        for logger in loggers
    }

    yield

    for logger in loggers:
        level, propagate, handlers = saved[logger.name]
        for handler in list(logger.handlers):
            if handler not in handlers and type(handler) in _OWN_HANDLER_TYPES:
                logger.removeHandler(handler)
                handler.close()
        for handler in handlers:
            if handler not in logger.handlers:
                logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = propagate
