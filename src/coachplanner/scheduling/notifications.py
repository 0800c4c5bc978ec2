"""Fire-and-forget session notifications.

Routes schedule `SessionNotifier.notify` as a background task after the
transition is committed; nothing in the engine waits on delivery.
"""

import logging
from typing import Any

import httpx

from coachplanner.config import get_settings
from coachplanner.models.session import CourseSession

logger = logging.getLogger(__name__)

SESSION_OPENED = "session.opened"
SESSION_CANCELLED = "session.cancelled"


def session_event(event: str, course_session: CourseSession) -> dict[str, Any]:
    return {
        "event": event,
        "session_id": course_session.id,
        "coach_id": course_session.coach_id,
        "classroom_id": course_session.classroom_id,
        "scheduled_date": course_session.scheduled_date.isoformat(),
        "start_time": course_session.start_time.strftime("%H:%M"),
        "end_time": course_session.end_time.strftime("%H:%M"),
        "status": course_session.status,
    }


class SessionNotifier:
    """Posts events to a webhook, or just logs them when none is configured."""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.webhook_url = webhook_url if webhook_url is not None else settings.notify_webhook_url
        self.timeout = timeout or settings.notify_timeout_seconds
        self._transport = transport

    async def notify(self, payload: dict[str, Any]) -> None:
        if not self.webhook_url:
            logger.info("Notification %s for session %s", payload["event"], payload["session_id"])
            return
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                "Notification %s for session %s failed: %s",
                payload["event"],
                payload["session_id"],
                e,
            )
