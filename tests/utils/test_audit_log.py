import json
from datetime import date
from typing import Any, List

import pytest
from restaurant_booking.domain.errors import RejectionCode
from restaurant_booking.models import SlotTime
from restaurant_booking.utils import audit_log
from restaurant_booking.utils.request_id import set_request_id


class DummyLogger:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def info(self, message: str) -> None:
        self.messages.append(message)


def test_emit_audit_log_outputs_json(monkeypatch: pytest.MonkeyPatch) -> None:
    dummy = DummyLogger()
    monkeypatch.setattr(audit_log, "_audit_logger", dummy)

    set_request_id("req-123")
    audit_log.emit_audit_log(
        action="booking.committed",
        date=date(2025, 6, 2),
        slot=SlotTime.parse("18:00"),
        seat_type="table",
        party_size=6,
        event_id="evt-1",
        capacity_units=2,
    )
    set_request_id(None)

    assert len(dummy.messages) == 1
    payload = json.loads(dummy.messages[0])
    assert payload["action"] == "booking.committed"
    assert payload["request_id"] == "req-123"
    assert payload["date"] == "2025-06-02"
    assert payload["slot"] == "18:00"
    assert payload["capacity_units"] == 2
    assert "reason" not in payload
    assert "timestamp" in payload


def test_rejection_reason_uses_code_value(monkeypatch: pytest.MonkeyPatch) -> None:
    dummy = DummyLogger()
    monkeypatch.setattr(audit_log, "_audit_logger", dummy)

    audit_log.emit_audit_log(
        action="booking.rejected",
        date=None,
        slot=None,
        seat_type="counter",
        party_size=3,
        reason=RejectionCode.COUNTER_MAX_EXCEEDED,
    )

    payload = json.loads(dummy.messages[0])
    assert payload["reason"] == "counter_max_exceeded"
    assert "date" not in payload


def test_emit_audit_log_raises_on_logger_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    class FailingLogger:
        def info(self, _: Any) -> None:
            raise ValueError("fail")

    monkeypatch.setattr(audit_log, "_audit_logger", FailingLogger())

    with pytest.raises(RuntimeError):
        audit_log.emit_audit_log(
            action="booking.failed",
            date=date(2025, 6, 2),
            slot="18:00",
            seat_type="table",
            party_size=4,
            reason="gateway_unavailable",
        )
