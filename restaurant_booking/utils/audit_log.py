from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from .request_id import get_request_id

AuditAction = Literal[
    "booking.committed",
    "booking.rejected",
    "booking.failed",
]

_audit_logger = logging.getLogger("audit")
_audit_logger.setLevel(logging.INFO)
if not _audit_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    _audit_logger.addHandler(handler)
_audit_logger.propagate = False


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def emit_audit_log(
    *,
    action: AuditAction,
    date: Any,
    slot: Any,
    seat_type: Optional[str],
    party_size: Optional[int],
    event_id: Optional[str] = None,
    capacity_units: Optional[int] = None,
    reason: Any = None,
    message: Optional[str] = None,
) -> None:
    """Emit one structured JSON audit line. Raises RuntimeError if logging fails."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": "info",
        "action": action,
        "request_id": get_request_id(),
        "date": _to_str(date),
        "slot": _to_str(slot),
        "seat_type": seat_type,
        "party_size": party_size,
        "event_id": event_id,
        "capacity_units": capacity_units,
        "reason": _to_str(reason),
        "message": message,
    }
    # Customer names stay out of the audit trail.
    compact_payload = {k: v for k, v in payload.items() if v is not None}
    try:
        _audit_logger.info(json.dumps(compact_payload, ensure_ascii=False))
    except Exception as exc:  # pragma: no cover - defensive
        raise RuntimeError("failed to emit audit log") from exc
