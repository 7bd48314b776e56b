import logging

import pytest

from storefront import cli
from storefront.utils.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_level():
    root = get_logger()
    level = root.level
    yield
    root.setLevel(level)


def test_area_loggers_nest_under_storefront():
    assert get_logger("data.cart").name == "storefront.data.cart"
    assert get_logger().name == "storefront"


def test_configure_sets_level_once_per_call():
    root = get_logger()
    handlers = list(root.handlers)
    configure_logging("debug")
    assert root.level == logging.DEBUG
    configure_logging("WARNING")
    assert root.level == logging.WARNING
    assert root.handlers == handlers
    assert root.propagate is False


def test_unknown_level_name_falls_back_to_info():
    assert configure_logging("LOUD").level == logging.INFO


class EmptyCatalog:
    def get_brands(self):
        return []


def test_cli_log_level_option(monkeypatch):
    monkeypatch.setattr(cli, "get_catalog_store", EmptyCatalog)
    assert cli.main(["--log-level", "ERROR", "brands"]) == 0
    assert get_logger().level == logging.ERROR
