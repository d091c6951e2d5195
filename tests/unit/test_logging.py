from __future__ import annotations

import json
import logging

from bikegarage.utils.logging import _json_formatter

EXPECTED_DELTA = 10
EXPECTED_RECORDS = 4


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.delta = EXPECTED_DELTA
    record.job = "increase_speed_1"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["delta"] == EXPECTED_DELTA
    assert payload["job"] == "increase_speed_1"
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"records": EXPECTED_RECORDS}

    payload = json.loads(_json_formatter(record))

    assert payload["records"] == EXPECTED_RECORDS
