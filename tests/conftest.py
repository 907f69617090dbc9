import logging

import pytest

from lazy_ioc import Blueprint

log_capture: list[str] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(self.format(record))


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture
def blueprint() -> Blueprint:
    return Blueprint()


@pytest.fixture
def lazy_logs():
    handler = ListLogHandler()
    logger = logging.getLogger("lazy_ioc")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)
