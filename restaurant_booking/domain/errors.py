"""Domain errors for availability lookups and booking submission."""

from dataclasses import dataclass
from enum import StrEnum


class RejectionCode(StrEnum):
    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    PARTY_SIZE_OUT_OF_RANGE = "party_size_out_of_range"
    UNKNOWN_SEAT_TYPE = "unknown_seat_type"
    COUNTER_MAX_EXCEEDED = "counter_max_exceeded"
    TABLE_MIN_NOT_MET = "table_min_not_met"
    SEAT_MAX_EXCEEDED = "seat_max_exceeded"
    SEAT_MIN_NOT_MET = "seat_min_not_met"
    SLOT_UNAVAILABLE = "slot_unavailable"


@dataclass(frozen=True)
class Rejection:
    """Outcome of a failed validation rule, with a user-safe message."""

    code: RejectionCode
    message: str


class ReservationError(Exception):
    pass


class BookingValidationError(ReservationError):
    def __init__(self, rejection: Rejection) -> None:
        super().__init__(rejection.message)
        self.rejection = rejection

    @property
    def code(self) -> RejectionCode:
        return self.rejection.code

    @property
    def message(self) -> str:
        return self.rejection.message


class SlotUnavailableError(BookingValidationError):
    pass


class GatewayError(ReservationError):
    pass


class GatewayUnavailable(GatewayError):
    """External event store unreachable or timed out. Safe to retry the operation."""


class GatewayRejected(GatewayError):
    """External event store refused the write (auth, quota, bad request)."""


class ConfigError(ReservationError):
    pass
