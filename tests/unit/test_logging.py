import copy
import logging

from app.core.logging import LOGGING_CONFIG
from app.core.logging import setup_logging


def test_setup_logging_applies_app_level():
    setup_logging("warning")
    try:
        assert logging.getLogger("app").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").propagate is False
    finally:
        setup_logging()


def test_relay_logger_follows_app_level():
    setup_logging("debug")
    try:
        relay_logger = logging.getLogger("app.generation_logic.stream_relay")
        assert relay_logger.getEffectiveLevel() == logging.DEBUG
        assert relay_logger.isEnabledFor(logging.DEBUG)
    finally:
        setup_logging()


def test_config_can_be_copied():
    config = copy.deepcopy(LOGGING_CONFIG)

    assert config["handlers"]["default"]["stream"] == "ext://sys.stderr"
    assert config["handlers"]["app"]["stream"] == "ext://sys.stdout"
