"""Tests for structured JSON logging."""

import json
import logging

from stockwise.core.logging import (
    JsonFormatter,
    get_request_id,
    mask,
    set_request_id,
    setup_logging,
)


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_masking_service_key_in_message():
    """Backend JWT keys are masked in log messages."""
    line = JsonFormatter().format(
        _record("key eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0")
    )
    payload = json.loads(line)

    assert "eyJ***" in payload["msg"]
    assert "eyJyb2xlIjoic2VydmljZV9yb2xlIn0" not in payload["msg"]


def test_masking_client_contacts():
    """Emails and international phone numbers are masked, amounts are not."""
    payload = json.loads(
        JsonFormatter().format(
            _record("relance dupont@example.com via +33 6 12 34 56 78 pour 125000.50")
        )
    )

    assert "***@***" in payload["msg"]
    assert "+***" in payload["msg"]
    assert "dupont@example.com" not in payload["msg"]
    assert "125000.50" in payload["msg"]


def test_masking_sensitive_keys_in_extra():
    rec = _record("client")
    rec.__dict__["client"] = {"name": "Dupont", "email": "d@example.com", "phone": "0612345678"}
    payload = json.loads(JsonFormatter().format(rec))

    assert payload["extra"]["client"]["name"] == "Dupont"
    assert payload["extra"]["client"]["email"] == "***"
    assert payload["extra"]["client"]["phone"] == "***"


def test_extra_numbers_are_kept():
    rec = _record("component analyzed")
    rec.__dict__["insights"] = 3
    payload = json.loads(JsonFormatter().format(rec))

    assert payload["extra"]["insights"] == 3


def test_request_id_correlation():
    rid = set_request_id("req-42")
    assert rid == "req-42"
    assert get_request_id() == "req-42"

    payload = json.loads(JsonFormatter().format(_record("hello")))
    assert payload["request_id"] == "req-42"


def test_request_id_generated():
    rid = set_request_id()
    assert len(rid) == 36


def test_nested_values_are_masked():
    masked = mask({"contacts": [{"email": "a@b.fr"}, "appel +33 6 12 34 56 78"], "total": 12.5})

    assert masked["contacts"][0]["email"] == "***"
    assert masked["contacts"][1] == "appel +***"
    assert masked["total"] == 12.5


def test_setup_logging_writes_json_lines(tmp_path):
    path = tmp_path / "logs" / "stockwise.log"
    setup_logging("info", file_path=str(path))

    logging.getLogger("stockwise.test").info("notifications published", extra={"count": 2})
    for handler in logging.getLogger().handlers:
        handler.flush()

    payload = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert payload["level"] == "INFO"
    assert payload["msg"] == "notifications published"
    assert payload["extra"] == {"count": 2}
