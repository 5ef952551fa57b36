import json
import logging

import pytest
import structlog

from shop_cart import log_config


@pytest.fixture
def fresh_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(log_config, "_CONFIGURED", False)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_json_format_routes_stdlib_records(fresh_logging, capsys):
    log_config.configure_logging("json", "DEBUG")

    logging.getLogger("shop_cart.test").info("hello from stdlib")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "hello from stdlib"
    assert record["level"] == "info"
    assert "timestamp" in record


def test_second_call_is_ignored(fresh_logging):
    log_config.configure_logging("console", "WARNING")
    handlers = logging.getLogger().handlers[:]

    log_config.configure_logging("json", "DEBUG")

    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.WARNING
