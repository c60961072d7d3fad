import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_gateway, get_holidays, get_shop_config
from ..domain.errors import (
    BookingValidationError,
    GatewayRejected,
    GatewayUnavailable,
    Rejection,
    RejectionCode,
    SlotUnavailableError,
)
from ..domain.repositories import CalendarGateway, HolidayCalendar
from ..models import BookingRequest, SlotTime
from ..schemas import BookedEventRead, BookingCreate
from ..shop_config import ShopConfig
from ..usecases import reservations as reservation_usecase
from ..utils.audit_log import emit_audit_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["reservations"])


def _parse_slot(value: str | None) -> SlotTime | None:
    if value is None or not value.strip():
        return None
    try:
        return SlotTime.parse(value)
    except ValueError as exc:
        raise BookingValidationError(
            Rejection(RejectionCode.INVALID_FIELD, f"time must be HH:MM, got {value!r}")
        ) from exc


def _to_request(payload: BookingCreate) -> BookingRequest:
    return BookingRequest(
        date=payload.date,
        slot=_parse_slot(payload.time),
        customer_name=payload.name,
        party_size=payload.party_size,
        seat_type=payload.seat_type,
    )


def _rejected(exc: BookingValidationError, request: BookingRequest) -> HTTPException:
    emit_audit_log(
        action="booking.rejected",
        date=request.date,
        slot=request.slot,
        seat_type=request.seat_type,
        party_size=request.party_size,
        reason=exc.code,
    )
    status_code = (
        status.HTTP_409_CONFLICT if isinstance(exc, SlotUnavailableError) else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    return HTTPException(status_code=status_code, detail={"code": str(exc.code), "message": exc.message})


@router.post("/reservations", response_model=BookedEventRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: BookingCreate,
    gateway: CalendarGateway = Depends(get_gateway),
    holidays: HolidayCalendar = Depends(get_holidays),
    config: ShopConfig = Depends(get_shop_config),
) -> BookedEventRead:
    try:
        request = _to_request(payload)
    except BookingValidationError as exc:
        unparsed = BookingRequest(date=payload.date, seat_type=payload.seat_type, party_size=payload.party_size)
        raise _rejected(exc, unparsed)
    try:
        event = await reservation_usecase.submit_booking(gateway, holidays, config=config, request=request)
    except BookingValidationError as exc:
        raise _rejected(exc, request)
    except GatewayUnavailable as exc:
        emit_audit_log(
            action="booking.failed",
            date=request.date,
            slot=request.slot,
            seat_type=request.seat_type,
            party_size=request.party_size,
            reason="gateway_unavailable",
            message=str(exc),
        )
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="calendar unavailable, try again")
    except GatewayRejected as exc:
        emit_audit_log(
            action="booking.failed",
            date=request.date,
            slot=request.slot,
            seat_type=request.seat_type,
            party_size=request.party_size,
            reason="gateway_rejected",
            message=str(exc),
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="calendar refused the booking")

    try:
        emit_audit_log(
            action="booking.committed",
            date=event.date,
            slot=event.slot,
            seat_type=event.seat_type,
            party_size=event.party_size,
            event_id=event.event_id,
            capacity_units=event.capacity_units,
        )
    except RuntimeError:
        # The booking exists in the calendar; report it rather than fail the request.
        logger.exception("Audit log failed for event %s", event.event_id)
    return BookedEventRead.from_domain(event=event)
