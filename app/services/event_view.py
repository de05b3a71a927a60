# app/services/event_view.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from app.models.enums import FilterMode, GateDecision, SessionStatus
from app.models.submission import EventRecordsPayload, SubmissionRecord
from app.services.records_client import DEFAULT_FETCH_ERROR, RecordsFetchError, fetch_event_records
from app.services.submission_filter import filter_submissions

logger = logging.getLogger("app.services.event_view")  # Logger for this module


def is_event_code_ready(event_code: Optional[str]) -> bool:
    return bool(event_code and event_code.strip())


def gate_event_view(session_status: SessionStatus, event_code: Optional[str]) -> GateDecision:
    """Decides whether the event page may fetch, must wait, or must send the admin to sign in.

    Nothing is fetched before the session has resolved.
    """
    if session_status == SessionStatus.LOADING:
        return GateDecision.WAIT
    if session_status != SessionStatus.AUTHENTICATED:
        return GateDecision.REDIRECT
    if not is_event_code_ready(event_code):
        return GateDecision.WAIT
    return GateDecision.FETCH


class EventView(BaseModel):
    event_code: str
    filter_mode: FilterMode
    records: List[SubmissionRecord] = []
    rows: List[SubmissionRecord] = []
    error: Optional[str] = None
    raw: Any = None

    @property
    def total_records(self) -> int:
        return len(self.records)


class _SessionSlot(BaseModel):
    generation: int = 0
    event_code: Optional[str] = None
    payload: Optional[EventRecordsPayload] = None


class EventViewStore:
    """
    In-memory record lists, one per admin session.

    Every load gets a generation number from ``begin``. ``commit`` only
    stores a result whose generation is still the newest for that session,
    so a slow response for an earlier event cannot replace a newer one.
    """

    def __init__(self):
        self._slots: Dict[str, _SessionSlot] = {}

    def begin(self, session_key: str, event_code: str) -> int:
        slot = self._slots.setdefault(session_key, _SessionSlot())
        slot.generation += 1
        if slot.event_code != event_code:
            # A different event replaces the old state wholesale
            slot.event_code = event_code
            slot.payload = None
        return slot.generation

    def is_current(self, session_key: str, generation: int) -> bool:
        slot = self._slots.get(session_key)
        return slot is not None and slot.generation == generation

    def commit(self, session_key: str, generation: int, event_code: str, payload: EventRecordsPayload) -> bool:
        if not self.is_current(session_key, generation):
            return False
        slot = self._slots[session_key]
        slot.event_code = event_code
        slot.payload = payload
        return True

    def discard(self, session_key: str, generation: int) -> bool:
        """Drops the stored records after a failed load, so the next visit refetches."""
        if not self.is_current(session_key, generation):
            return False
        self._slots[session_key].payload = None
        return True

    def get_loaded(self, session_key: str, event_code: str) -> Optional[EventRecordsPayload]:
        slot = self._slots.get(session_key)
        if slot is None or slot.event_code != event_code:
            return None
        return slot.payload

    def clear(self):
        self._slots.clear()


# Shared by the HTML and JSON routes; keyed by admin user id
event_view_store = EventViewStore()


async def _load_records(
    store: EventViewStore, session_key: str, event_code: str
) -> Tuple[Optional[EventRecordsPayload], Optional[str]]:
    generation = store.begin(session_key, event_code)
    try:
        payload = await fetch_event_records(event_code)
    except RecordsFetchError as e:
        logger.error(f"Error fetching event data for {event_code}: {e.message}")
        store.discard(session_key, generation)
        return None, e.message
    except Exception as e:
        logger.exception(f"Unexpected error fetching event data for {event_code}: {e}")
        store.discard(session_key, generation)
        return None, str(e) or DEFAULT_FETCH_ERROR

    if not store.commit(session_key, generation, event_code, payload):
        logger.info(f"Discarding stale response for event {event_code} (session {session_key}, generation {generation}).")
    return payload, None


async def load_event_view(
    session_key: str,
    event_code: str,
    filter_mode: FilterMode = FilterMode.ALL,
    refresh: bool = False,
    store: Optional[EventViewStore] = None,
) -> EventView:
    """
    Builds the event page for one admin session.

    Records are fetched once per (session, event code); switching the
    filter on the same event reuses them unless ``refresh`` is set.
    Fetch errors end up in ``EventView.error`` with no rows.
    """
    store = store if store is not None else event_view_store

    payload = None if refresh else store.get_loaded(session_key, event_code)
    if payload is None:
        payload, error = await _load_records(store, session_key, event_code)
        if error is not None:
            return EventView(event_code=event_code, filter_mode=filter_mode, error=error)
    else:
        logger.debug(f"Reusing {len(payload.records)} loaded record(s) for event {event_code}.")

    return EventView(
        event_code=event_code,
        filter_mode=filter_mode,
        records=list(payload.records),
        rows=filter_submissions(payload.records, filter_mode),
        raw=payload.raw,
    )
