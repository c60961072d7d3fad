import logging

from ..domain.errors import BookingValidationError, Rejection, RejectionCode, SlotUnavailableError
from ..domain.repositories import CalendarGateway, HolidayCalendar
from ..domain.services import validate_booking
from ..models import BookedEvent, BookingDetails, BookingRequest
from ..shop_config import ShopConfig
from .availability import available_slots

logger = logging.getLogger(__name__)


async def submit_booking(
    gateway: CalendarGateway,
    holidays: HolidayCalendar,
    *,
    config: ShopConfig,
    request: BookingRequest,
) -> BookedEvent:
    """
    Validate the request, re-check the slot against live counts, then commit it.

    Availability is read and the event written in two separate calls; the calendar
    has no conditional insert, so concurrent submissions for the last seat of a slot
    can all succeed.
    """
    rejection = validate_booking(request, config)
    if rejection is not None:
        logger.info("Booking rejected: %s", rejection.code)
        raise BookingValidationError(rejection)

    rule = config.seat_type(request.seat_type or "")
    if (
        rule is None
        or request.date is None
        or request.slot is None
        or request.customer_name is None
        or request.party_size is None
    ):
        raise BookingValidationError(Rejection(RejectionCode.MISSING_FIELD, "incomplete booking request"))

    open_slots = await available_slots(gateway, holidays, config=config, target=request.date)
    if request.slot not in open_slots:
        logger.info("Booking rejected: slot %s on %s unavailable", request.slot, request.date)
        raise SlotUnavailableError(
            Rejection(RejectionCode.SLOT_UNAVAILABLE, f"{request.date} {request.slot} is not available")
        )

    details = BookingDetails(
        customer_name=request.customer_name.strip(),
        party_size=request.party_size,
        seat_type=rule.name,
        capacity_units=rule.capacity_units_for(request.party_size),
    )
    return await gateway.commit_booking(request.date, request.slot, details)
