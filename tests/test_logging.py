import logging

import pytest

from logo_studio.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_levels():
    saved = {name: logging.getLogger(name).level for name in ("httpx", "openai")}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_client_loggers_are_quieted():
    setup_logging("INFO")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("openai").level == logging.WARNING


def test_debug_keeps_client_loggers_verbose():
    setup_logging("debug")

    assert logging.getLogger("httpx").level == logging.DEBUG


def test_get_logger_returns_named_logger():
    assert get_logger("logo_studio.cli").name == "logo_studio.cli"
