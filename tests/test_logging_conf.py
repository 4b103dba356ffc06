from __future__ import annotations

import json
import logging
import sys

import pytest

from newsgate.logging_conf import JsonFormatter, get_logger, setup_logging


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    before = {h: h.level for h in root.handlers}
    level = root.level
    yield root
    for handler, handler_level in before.items():
        handler.setLevel(handler_level)
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "newsgate.relay", logging.INFO, __file__, 1, "backend.%s", ("response",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_merges_extras_without_clobbering_core_keys():
    line = JsonFormatter().format(_record(status_code=502, level="spoofed", url="http://b/x"))
    payload = json.loads(line)
    assert payload["message"] == "backend.response"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "newsgate.relay"
    assert payload["status_code"] == 502
    assert payload["url"] == "http://b/x"
    assert "lineno" not in payload


def test_formatter_includes_exception_text():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc_info"]


def test_setup_logging_relevels_instead_of_duplicating(clean_root):
    setup_logging("debug")
    setup_logging("WARNING")
    installed = [h for h in clean_root.handlers if isinstance(h.formatter, JsonFormatter)]
    assert len(installed) == 1
    assert installed[0].level == logging.WARNING
    assert clean_root.level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_unknown_level_falls_back_to_info(clean_root):
    setup_logging("chatty")
    assert clean_root.level == logging.INFO


def test_loggers_share_the_package_namespace():
    assert get_logger("relay").name == "newsgate.relay"
    assert get_logger("newsgate").name == "newsgate"
    assert get_logger("runner.client").name == "runner.client"
