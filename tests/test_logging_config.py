from __future__ import annotations

import io
import json
import logging

from scripts.reclaim.logging_config import JsonFormatter, configure_logging


def test_json_formatter_includes_request_context() -> None:
    record = logging.LogRecord("reclaim.executor", logging.INFO, __file__, 1, "sent %s", ("x",), None)
    record.service = "github"
    record.org = "acme"
    record.mannequin = "alice-mannequin"
    record.line = 2

    entry = json.loads(JsonFormatter().format(record))

    assert entry["message"] == "sent x"
    assert entry["level"] == "INFO"
    assert entry["service"] == "github"
    assert entry["org"] == "acme"
    assert entry["mannequin"] == "alice-mannequin"
    assert entry["line"] == 2
    assert "target" not in entry


def test_configure_logging_installs_single_handler() -> None:
    configure_logging("debug")
    configure_logging("debug")

    logger = logging.getLogger("reclaim")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)
    assert logger.propagate is False


def test_configure_logging_writes_to_given_stream() -> None:
    stream = io.StringIO()
    configure_logging("info", stream=stream)

    logging.getLogger("reclaim.cli").info("Reclaiming mannequin", extra={"org": "acme"})

    entry = json.loads(stream.getvalue())
    assert entry["logger"] == "reclaim.cli"
    assert entry["org"] == "acme"
