"""Google Calendar v3 adapter for the EventStore protocol.

The Google client is synchronous, so each call runs in a worker thread with its own
service object (httplib2 connections are not thread-safe).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..domain.errors import GatewayRejected, GatewayUnavailable
from ..domain.repositories import CalendarEvent

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]

_TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error, GoogleAuthError)


def _parse_event_time(value: dict[str, Any]) -> Optional[datetime]:
    # All-day entries carry "date" only and are not bookings.
    raw = value.get("dateTime")
    if raw is None:
        return None
    return datetime.fromisoformat(raw)


class GoogleCalendarEventStore:
    def __init__(self, calendar_id: str, credentials: Any, *, time_zone: str) -> None:
        self.calendar_id = calendar_id
        self.credentials = credentials
        self.time_zone = time_zone

    @classmethod
    def from_service_account_file(cls, path: str, calendar_id: str, *, time_zone: str) -> "GoogleCalendarEventStore":
        credentials = service_account.Credentials.from_service_account_file(path, scopes=SCOPES)
        return cls(calendar_id, credentials, time_zone=time_zone)

    def _service(self) -> Any:
        return build("calendar", "v3", credentials=self.credentials, cache_discovery=False)

    def _list_sync(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        events_api = self._service().events()
        events: list[CalendarEvent] = []
        page_token: Optional[str] = None
        while True:
            response = events_api.list(
                calendarId=self.calendar_id,
                timeMin=time_min.isoformat(),
                timeMax=time_max.isoformat(),
                timeZone=self.time_zone,
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            ).execute()
            for item in response.get("items", []):
                start = _parse_event_time(item.get("start", {}))
                end = _parse_event_time(item.get("end", {}))
                if start is None or end is None:
                    continue
                events.append(
                    CalendarEvent(
                        start=start,
                        end=end,
                        summary=item.get("summary", ""),
                        description=item.get("description", ""),
                    )
                )
            page_token = response.get("nextPageToken")
            if not page_token:
                return events

    def _insert_sync(self, summary: str, description: str, start: datetime, end: datetime) -> str:
        body = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": start.isoformat(), "timeZone": self.time_zone},
            "end": {"dateTime": end.isoformat(), "timeZone": self.time_zone},
        }
        created = self._service().events().insert(calendarId=self.calendar_id, body=body).execute()
        return str(created["id"])

    async def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        try:
            return await asyncio.to_thread(self._list_sync, time_min, time_max)
        except HttpError as exc:
            logger.error("Calendar list failed with HTTP %s", exc.resp.status)
            raise GatewayUnavailable(f"calendar list failed: HTTP {exc.resp.status}") from exc
        except _TRANSPORT_ERRORS as exc:
            logger.error("Calendar list failed: %s", exc)
            raise GatewayUnavailable("calendar unreachable") from exc

    async def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        try:
            return await asyncio.to_thread(self._insert_sync, summary, description, start, end)
        except HttpError as exc:
            status_code = int(exc.resp.status)
            logger.error("Calendar insert failed with HTTP %s", status_code)
            if status_code >= 500:
                raise GatewayUnavailable(f"calendar insert failed: HTTP {status_code}") from exc
            raise GatewayRejected(f"calendar refused insert: HTTP {status_code}") from exc
        except RefreshError as exc:
            logger.error("Calendar credentials rejected: %s", exc)
            raise GatewayRejected("calendar credentials rejected") from exc
        except _TRANSPORT_ERRORS as exc:
            logger.error("Calendar insert failed: %s", exc)
            raise GatewayUnavailable("calendar unreachable") from exc
