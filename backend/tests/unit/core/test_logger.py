"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from library_api.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG


def test_json_formatter_copies_known_extras() -> None:
    """Extra attributes such as ``author_id`` end up in the JSON payload."""

    record = logging.LogRecord("library_api", logging.INFO, __file__, 1, "author.created", (), None)
    record.author_id = "abc"
    record.unrelated = "dropped"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "author.created"
    assert payload["author_id"] == "abc"
    assert "unrelated" not in payload
