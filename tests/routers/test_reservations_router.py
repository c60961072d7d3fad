from datetime import date, datetime, timedelta
from typing import Any, List

import pytest
from fastapi import HTTPException
from restaurant_booking.domain.errors import (
    BookingValidationError,
    GatewayRejected,
    GatewayUnavailable,
    Rejection,
    RejectionCode,
    SlotUnavailableError,
)
from restaurant_booking.models import BookedEvent, BookingRequest, SlotTime
from restaurant_booking.routers import reservations as router
from restaurant_booking.schemas import BookedEventRead, BookingCreate
from restaurant_booking.shop_config import ShopConfig
from restaurant_booking.utils.time import JST


def _event() -> BookedEvent:
    starts = datetime(2025, 6, 2, 18, 0, tzinfo=JST)
    return BookedEvent(
        event_id="evt-9",
        date=date(2025, 6, 2),
        slot=SlotTime.parse("18:00"),
        starts_at=starts,
        ends_at=starts + timedelta(minutes=30),
        customer_name="Kato",
        party_size=6,
        seat_type="table",
        capacity_units=2,
    )


def _payload() -> BookingCreate:
    return BookingCreate(date=date(2025, 6, 2), time="18:00", name="Kato", party_size=6, seat_type="table")


async def _call(payload: BookingCreate) -> BookedEventRead:
    return await router.create_reservation(payload=payload, gateway=object(), holidays=object(), config=ShopConfig())  # type: ignore[arg-type]


@pytest.fixture
def audit_calls(monkeypatch: pytest.MonkeyPatch) -> List[dict[str, Any]]:
    calls: List[dict[str, Any]] = []
    monkeypatch.setattr(router, "emit_audit_log", lambda **kwargs: calls.append(kwargs))
    return calls


@pytest.mark.asyncio
async def test_create_reservation_returns_event_and_audits(
    monkeypatch: pytest.MonkeyPatch, audit_calls: List[dict[str, Any]]
) -> None:
    seen: List[BookingRequest] = []

    async def fake_submit(*args: object, request: BookingRequest, **kwargs: object) -> BookedEvent:
        seen.append(request)
        return _event()

    monkeypatch.setattr(router.reservation_usecase, "submit_booking", fake_submit)

    result = await _call(_payload())

    assert result.event_id == "evt-9"
    assert result.time == "18:00"
    assert result.capacity_units == 2
    assert seen[0].slot == SlotTime.parse("18:00")
    assert seen[0].customer_name == "Kato"
    assert audit_calls[0]["action"] == "booking.committed"
    assert audit_calls[0]["event_id"] == "evt-9"
    assert "customer_name" not in audit_calls[0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status_code",
    [
        (BookingValidationError(Rejection(RejectionCode.COUNTER_MAX_EXCEEDED, "counter seat max exceeded")), 422),
        (SlotUnavailableError(Rejection(RejectionCode.SLOT_UNAVAILABLE, "2025-06-02 18:00 is not available")), 409),
        (GatewayUnavailable("timed out"), 503),
        (GatewayRejected("quota"), 502),
    ],
)
async def test_errors_map_to_status_codes(
    monkeypatch: pytest.MonkeyPatch,
    audit_calls: List[dict[str, Any]],
    error: Exception,
    status_code: int,
) -> None:
    async def fake_submit(*args: object, **kwargs: object) -> BookedEvent:
        raise error

    monkeypatch.setattr(router.reservation_usecase, "submit_booking", fake_submit)

    with pytest.raises(HTTPException) as excinfo:
        await _call(_payload())

    assert excinfo.value.status_code == status_code
    assert audit_calls[0]["action"] in ("booking.rejected", "booking.failed")


@pytest.mark.asyncio
async def test_validation_detail_carries_code(monkeypatch: pytest.MonkeyPatch, audit_calls: List[dict[str, Any]]) -> None:
    async def fake_submit(*args: object, **kwargs: object) -> BookedEvent:
        raise BookingValidationError(Rejection(RejectionCode.MISSING_FIELD, "missing required fields: name"))

    monkeypatch.setattr(router.reservation_usecase, "submit_booking", fake_submit)

    with pytest.raises(HTTPException) as excinfo:
        await _call(BookingCreate(date=date(2025, 6, 2), time="18:00"))

    assert excinfo.value.detail == {"code": "missing_field", "message": "missing required fields: name"}
    assert audit_calls[0]["reason"] == RejectionCode.MISSING_FIELD


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_committed_booking(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_submit(*args: object, **kwargs: object) -> BookedEvent:
        return _event()

    def failing_emit(**kwargs: Any) -> None:
        raise RuntimeError("fail log")

    monkeypatch.setattr(router.reservation_usecase, "submit_booking", fake_submit)
    monkeypatch.setattr(router, "emit_audit_log", failing_emit)

    result = await _call(_payload())
    assert result.event_id == "evt-9"


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_time", ["6pm", "25:00", "18-00"])
async def test_malformed_time_is_rejected_with_code(
    monkeypatch: pytest.MonkeyPatch, audit_calls: List[dict[str, Any]], raw_time: str
) -> None:
    async def fake_submit(*args: object, **kwargs: object) -> BookedEvent:
        raise AssertionError("malformed requests never reach the use case")

    monkeypatch.setattr(router.reservation_usecase, "submit_booking", fake_submit)
    payload = BookingCreate(date=date(2025, 6, 2), time=raw_time, name="Kato", party_size=2, seat_type="counter")

    with pytest.raises(HTTPException) as excinfo:
        await _call(payload)

    assert excinfo.value.status_code == 422
    assert excinfo.value.detail["code"] == "invalid_field"
    assert audit_calls[0]["reason"] == RejectionCode.INVALID_FIELD


def test_request_normalizes_time() -> None:
    assert router._to_request(BookingCreate(time="9:05")).slot == SlotTime.parse("09:05")
    assert router._to_request(BookingCreate(time="  ")).slot is None
