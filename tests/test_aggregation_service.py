"""Tests for atomic summary aggregation."""

from concurrent.futures import ThreadPoolExecutor

from attendance_tracker.domain.summary import SessionSummary
from attendance_tracker.services.aggregation import AggregationService
from tests.conftest import InMemorySummaryRepository, Stack, make_event


def test_concurrent_entries_are_all_counted(stack: Stack, session_id: str) -> None:
    total = 200
    events = [make_event(session_id, student_id=f"S{i}") for i in range(total)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(stack.admission.submit_event, events))

    summary = stack.session_admin.get_summary(session_id)
    assert all(result.admitted for result in results)
    assert summary is not None
    assert summary.counts["ENTRY"] == total
    assert summary.unique_present == total


def test_concurrent_folds_across_sessions_stay_separate() -> None:
    repository = InMemorySummaryRepository()
    service = AggregationService(repository)
    events = [
        make_event(session, status=status)
        for session in ("A", "B")
        for status in ("ENTRY", "EXIT") * 25
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda event: service.fold(event, 1234), events))

    for session in ("A", "B"):
        summary = repository.get_summary(session)
        assert summary is not None
        assert summary.counts["ENTRY"] == 25
        assert summary.counts["EXIT"] == 25
        assert summary.unique_present == 25
        assert summary.completed == 25
        assert summary.updated_at == 1234


def test_fold_keeps_existing_counters() -> None:
    repository = InMemorySummaryRepository()
    repository.rows["A"] = (
        SessionSummary(
            session_id="A",
            counts={"ENTRY": 3, "TOILET_OUT": 1, "TOILET_IN": 0, "EXIT": 2},
            unique_present=3,
            completed=2,
            updated_at=10,
        ),
        4,
    )

    summary = AggregationService(repository).fold(
        make_event("A", status="TOILET_IN"), 20
    )

    assert summary.counts == {"ENTRY": 3, "TOILET_OUT": 1, "TOILET_IN": 1, "EXIT": 2}
    assert summary.unique_present == 3
    assert summary.completed == 2
    assert summary.updated_at == 20
    assert repository.rows["A"][1] == 5
