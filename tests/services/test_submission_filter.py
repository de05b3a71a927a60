# tests/services/test_submission_filter.py
import pytest
from app.models.enums import FilterMode
from app.models.submission import SubmissionRecord
from app.services.submission_filter import (
    build_email_status_index,
    filter_submissions,
    include_record,
    normalize_status,
)


def make_record(email=None, status=None, name="Someone") -> SubmissionRecord:
    return SubmissionRecord(name=name, email=email, status=status)


SCENARIO = [
    make_record("a@x.com", "Pending", name="A1"),
    make_record("a@x.com", "Approved", name="A2"),
    make_record("b@x.com", "Rejected", name="B1"),
]


@pytest.mark.parametrize("raw, expected", [
    (None, "pending"),
    ("", "pending"),
    ("Pending", "pending"),
    ("APPROVED", "approved"),
    ("rejected", "rejected"),
    ("Archived", "archived"),
])
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected

@pytest.mark.parametrize("raw", [None, "", "Pending", "Approved", "ReJeCtEd", "Archived"])
def test_normalize_status_is_idempotent(raw):
    once = normalize_status(raw)
    assert normalize_status(once) == once

def test_email_index_keeps_every_status_in_order():
    records = [
        make_record("a@x.com", "Pending"),
        make_record("b@x.com", None),
        make_record("a@x.com", "Approved"),
        make_record("a@x.com", "Pending"),
    ]
    index = build_email_status_index(records)
    assert index == {
        "a@x.com": ["pending", "approved", "pending"],
        "b@x.com": ["pending"],
    }

def test_email_index_groups_missing_emails_under_empty_key():
    index = build_email_status_index([make_record(None, "Approved"), make_record("", "Rejected")])
    assert index == {"": ["approved", "rejected"]}

def test_filter_all_returns_everything():
    records = SCENARIO + [make_record("c@x.com", "Archived")]
    assert filter_submissions(records, FilterMode.ALL) == records

def test_filter_defaults_to_all():
    assert filter_submissions(SCENARIO) == SCENARIO

def test_filter_approved_and_pending_match_own_status():
    records = SCENARIO + [make_record("c@x.com", None, name="C1")]
    assert [r.name for r in filter_submissions(records, FilterMode.APPROVED)] == ["A2"]
    assert [r.name for r in filter_submissions(records, FilterMode.PENDING)] == ["A1", "C1"]

def test_scenario_rejected_excludes_emails_with_an_approval():
    result = filter_submissions(SCENARIO, FilterMode.REJECTED)
    assert [(r.email, r.status) for r in result] == [("b@x.com", "Rejected")]

def test_rejected_includes_every_record_of_never_approved_email():
    records = [
        make_record("c@x.com", "Pending", name="C1"),
        make_record("c@x.com", "Archived", name="C2"),
        make_record("c@x.com", "Rejected", name="C3"),
    ]
    assert [r.name for r in filter_submissions(records, FilterMode.REJECTED)] == ["C1", "C2", "C3"]

def test_rejected_record_is_kept_even_when_email_has_an_approval():
    records = [make_record("a@x.com", "Approved", name="A1"), make_record("a@x.com", "Rejected", name="A2")]
    assert [r.name for r in filter_submissions(records, FilterMode.REJECTED)] == ["A2"]

def test_unknown_status_only_visible_under_all():
    records = [make_record("d@x.com", "Approved"), make_record("d@x.com", "Archived", name="D2")]
    assert [r.name for r in filter_submissions(records, FilterMode.ALL)][-1] == "D2"
    for mode in (FilterMode.APPROVED, FilterMode.PENDING, FilterMode.REJECTED):
        assert "D2" not in [r.name for r in filter_submissions(records, mode)]

@pytest.mark.parametrize("mode", list(FilterMode))
def test_empty_input_gives_empty_output(mode):
    assert filter_submissions([], mode) == []

def test_include_record_falls_back_to_own_status_when_email_not_indexed():
    record = make_record("ghost@x.com", "Pending")
    assert include_record(record, {}, FilterMode.REJECTED) is True
    assert include_record(make_record("ghost@x.com", "Approved"), {}, FilterMode.REJECTED) is False

def test_approval_arriving_later_removes_pending_from_rejected_view():
    before = [make_record("e@x.com", "Pending", name="E1")]
    assert [r.name for r in filter_submissions(before, FilterMode.REJECTED)] == ["E1"]

    after = before + [make_record("e@x.com", "Approved", name="E2")]
    assert filter_submissions(after, FilterMode.REJECTED) == []
