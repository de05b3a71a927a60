# app/services/submission_filter.py
"""
Status classification and filtering of event submissions.

Everything here is a pure function of the record list and the selected
filter mode; the email index is rebuilt on every call.
"""
from typing import Dict, List, Optional, Sequence

from app.models.enums import FilterMode, SubmissionStatus
from app.models.submission import SubmissionRecord

EmailStatusIndex = Dict[str, List[str]]


def normalize_status(value: Optional[str]) -> str:
    """Lower-cases a raw status; absent or empty means pending.

    Unknown values are passed through lower-cased, so they only show up
    under the ``all`` filter.
    """
    if not value:
        return SubmissionStatus.PENDING.value
    return value.lower()


def build_email_status_index(records: Sequence[SubmissionRecord]) -> EmailStatusIndex:
    """Maps each email to the normalized statuses of its submissions, in record order."""
    index: EmailStatusIndex = {}
    for record in records:
        index.setdefault(record.email or "", []).append(normalize_status(record.status))
    return index


def include_record(record: SubmissionRecord, index: EmailStatusIndex, mode: FilterMode) -> bool:
    normalized = normalize_status(record.status)
    if mode == FilterMode.ALL:
        return True
    if mode == FilterMode.REJECTED:
        statuses = index.get(record.email or "") or [normalized]
        has_approval = any(s == SubmissionStatus.APPROVED.value for s in statuses)
        return normalized == SubmissionStatus.REJECTED.value or not has_approval
    return normalized == mode.value


def filter_submissions(records: Sequence[SubmissionRecord], mode: FilterMode = FilterMode.ALL) -> List[SubmissionRecord]:
    """Returns the records visible under ``mode``, keeping their original order."""
    if not records:
        return []
    index = build_email_status_index(records)
    return [record for record in records if include_record(record, index, mode)]
