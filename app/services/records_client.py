# app/services/records_client.py
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.models.submission import EventRecordsPayload, SubmissionRecord

logger = logging.getLogger("app.services.records_client")  # Logger for this module

DEFAULT_FETCH_ERROR = "Failed to load data"


class RecordsFetchError(Exception):
    """Raised when the upstream records endpoint cannot be used.

    ``message`` is the text shown to the admin in place of the table.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_records_url(event_code: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.SUBMISSIONS_API_BASE_URL).rstrip("/")
    return f"{base}/api/websites/{quote(event_code, safe='')}"


def _parse_records(raw_records: Any, event_code: str) -> List[SubmissionRecord]:
    if not isinstance(raw_records, list):
        if raw_records is not None:
            logger.warning(f"'records' for event {event_code} is not a list ({type(raw_records).__name__}); using an empty list.")
        return []

    records: List[SubmissionRecord] = []
    for position, item in enumerate(raw_records):
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object record #{position} for event {event_code}.")
            continue
        records.append(SubmissionRecord.model_validate(item))
    return records


def parse_records_response(status_code: int, body_text: str, event_code: str) -> EventRecordsPayload:
    """Turns an upstream response into a payload, or raises RecordsFetchError."""
    try:
        body = json.loads(body_text)
    except json.JSONDecodeError as e:
        logger.error(f"Upstream returned a non-JSON body for event {event_code} (HTTP {status_code}): {e}")
        raise RecordsFetchError(DEFAULT_FETCH_ERROR, status_code=status_code) from e

    ok = 200 <= status_code < 300
    if not ok:
        message = None
        if isinstance(body, dict):
            message = body.get("error")
        raise RecordsFetchError(message or f"Request failed: {status_code}", status_code=status_code)

    if not isinstance(body, dict):
        logger.warning(f"Upstream body for event {event_code} is not an object; treating it as having no records.")
        return EventRecordsPayload(records=[], raw=body)

    raw = body.get("raw")
    return EventRecordsPayload(
        records=_parse_records(body.get("records"), event_code),
        raw=raw if raw is not None else body,
    )


async def fetch_event_records(
    event_code: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> EventRecordsPayload:
    """
    Fetches the submissions of one event from the upstream backend.

    Raises:
        RecordsFetchError: on network failures, non-2xx responses or bodies
            that are not JSON. The error message is safe to show to admins.

    ``transport`` is only meant for tests (e.g. ``httpx.MockTransport``).
    """
    url = build_records_url(event_code)
    headers: Dict[str, str] = {"Accept": "application/json"}
    if settings.SUBMISSIONS_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.SUBMISSIONS_API_TOKEN}"

    logger.info(f"Fetching submissions for event {event_code} from {url}")
    try:
        async with httpx.AsyncClient(timeout=settings.SUBMISSIONS_API_TIMEOUT_SECONDS, transport=transport) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Network error fetching submissions for event {event_code}: {e}")
        raise RecordsFetchError(str(e) or DEFAULT_FETCH_ERROR) from e

    payload = parse_records_response(response.status_code, response.text, event_code)
    logger.info(f"Fetched {len(payload.records)} submission(s) for event {event_code}")
    return payload
