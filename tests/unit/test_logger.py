"""
Name: Structured Logging Tests

Responsibilities:
  - JSON formatter includes request context
  - Sensitive extras are redacted
  - Exceptions are serialized
"""

import json
import logging
import sys

import pytest

from slotbook.context import clear_context, set_request_context
from slotbook.crosscutting.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _record(msg: str = "evento", exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "slotbook", logging.INFO, __file__, 10, msg, (), exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_request_context_is_merged():
    set_request_context(request_id="req-1", method="POST", path="/v1/slots")
    try:
        payload = json.loads(JSONFormatter().format(_record()))
    finally:
        clear_context()

    assert payload["message"] == "evento"
    assert payload["request_id"] == "req-1"
    assert payload["level"] == "INFO"


def test_sensitive_extras_are_redacted():
    payload = json.loads(
        JSONFormatter().format(
            _record(
                credential="google-id-token",
                nested={"refresh_token": "r", "slot_id": "s-1"},
                slot_id="s-1",
            )
        )
    )

    assert payload["credential"] == "***REDACTADO***"
    assert payload["nested"] == {"refresh_token": "***REDACTADO***", "slot_id": "s-1"}
    assert payload["slot_id"] == "s-1"


def test_exception_is_serialized():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record(exc_info=sys.exc_info())

    payload = json.loads(JSONFormatter().format(record))

    assert payload["exception"]["type"] == "ValueError"
    assert payload["exception"]["message"] == "boom"
