# app/api/events.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api import deps
from app.models.enums import FilterMode
from app.models.submission import EventViewResponse, SubmissionRowPublic
from app.models.user import AdminUserPublic
from app.services.event_view import load_event_view
from app.services.submission_filter import normalize_status

logger = logging.getLogger("app.api.events")  # Logger for this module
router = APIRouter()


@router.get("/{event_code}/submissions", response_model=EventViewResponse)
async def get_event_submissions(
    event_code: str,
    status_filter: FilterMode = Query(FilterMode.ALL, alias="status", description="One of all, approved, pending, rejected."),
    refresh: bool = Query(False, description="Refetch from the upstream backend instead of reusing loaded records."),
    current_user: AdminUserPublic = Depends(deps.get_current_active_user),
):
    """
    JSON version of the admin event page.

    ``rejected`` returns every submission from an email that was never
    approved, plus submissions individually marked rejected.
    """
    view = await load_event_view(str(current_user.id), event_code, status_filter, refresh=refresh)
    if view.error is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=view.error)

    rows = [
        SubmissionRowPublic(
            name=r.name,
            email=r.email,
            status=r.status or "Pending",
            normalized_status=normalize_status(r.status),
            website=r.website,
            decision_reason=r.decision_reason,
        )
        for r in view.rows
    ]
    return EventViewResponse(
        event_code=view.event_code,
        filter=view.filter_mode,
        total_records=view.total_records,
        rows=rows,
    )
