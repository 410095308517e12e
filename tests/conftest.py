"""Shared test fixtures."""

import threading
import time
from dataclasses import dataclass, field, replace
from uuid import uuid4

import pytest

from attendance_tracker.config import Settings
from attendance_tracker.containers import AppContainer
from attendance_tracker.domain.admin_ops import AdminOperation, OperationOutcome
from attendance_tracker.domain.attendance import AttendanceEvent
from attendance_tracker.domain.identity import Identity
from attendance_tracker.domain.sessions import SessionRecord
from attendance_tracker.domain.summary import SessionSummary
from attendance_tracker.services.admission import (
    AdmissionService,
    AttendanceRepository,
)
from attendance_tracker.services.aggregation import AggregationService
from attendance_tracker.services.audit import AdminOperationRepository, AuditService
from attendance_tracker.services.identity import IdentityProvider
from attendance_tracker.services.sessions import (
    SessionAdminService,
    SessionRepository,
    SummaryRepository,
    SummaryUpdate,
)

ADMIN = Identity(user_id="admin-1", email="admin@example.com", is_admin=True)
STUDENT = Identity(user_id="student-1", email="student@example.com", is_admin=False)
OTHER_STUDENT = Identity(user_id="student-2", email=None, is_admin=False)


@dataclass
class FakeClock:
    """Controllable server clock in epoch milliseconds."""

    now: int = 2000

    def __call__(self) -> int:
        return self.now


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, SessionRecord] = field(default_factory=dict)

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def upsert_session(self, session: SessionRecord) -> None:
        self.sessions[session.id] = session

    def set_locked(self, session_id: str, locked: bool) -> None:
        session = self.sessions.get(session_id)
        if session is not None:
            self.sessions[session_id] = replace(session, is_locked=locked)


@dataclass
class InMemorySummaryRepository(SummaryRepository):
    """Versioned in-memory summaries with compare-and-retry writes."""

    rows: dict[str, tuple[SessionSummary, int]] = field(default_factory=dict)
    conflicts: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get_summary(self, session_id: str) -> SessionSummary | None:
        with self._lock:
            row = self.rows.get(session_id)
        return row[0] if row else None

    def transact(self, session_id: str, update: SummaryUpdate) -> SessionSummary | None:
        while True:
            with self._lock:
                current, version = self.rows.get(session_id, (None, 0))
            updated = update(current)
            if updated is None:
                return current
            # yield so concurrent writers interleave between read and write
            time.sleep(0)
            with self._lock:
                _, latest = self.rows.get(session_id, (None, 0))
                if latest == version:
                    self.rows[session_id] = (updated, version + 1)
                    return updated
                self.conflicts += 1


@dataclass
class InMemoryAttendanceRepository(AttendanceRepository):
    """In-memory attendance event repository for tests."""

    events: dict[str, AttendanceEvent] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def push_event(self, event: AttendanceEvent) -> str:
        event_id = str(uuid4())
        with self._lock:
            self.events[event_id] = replace(event, id=event_id)
        return event_id

    def get_event(self, event_id: str) -> AttendanceEvent | None:
        return self.events.get(event_id)

    def delete_event(self, event_id: str) -> None:
        with self._lock:
            self.events.pop(event_id, None)
            self.deleted.append(event_id)

    def set_server_timestamp(self, event_id: str, server_timestamp: int) -> None:
        with self._lock:
            event = self.events[event_id]
            self.events[event_id] = replace(event, server_timestamp=server_timestamp)


@dataclass
class InMemoryAdminOperationRepository(AdminOperationRepository):
    """In-memory admin operation repository for tests."""

    operations: dict[str, AdminOperation] = field(default_factory=dict)
    outcome_writes: int = 0

    def push_operation(self, operation: AdminOperation) -> str:
        operation_id = str(uuid4())
        self.operations[operation_id] = replace(operation, id=operation_id)
        return operation_id

    def get_operation(self, operation_id: str) -> AdminOperation | None:
        return self.operations.get(operation_id)

    def record_outcome(self, operation_id: str, outcome: OperationOutcome) -> None:
        self.outcome_writes += 1
        self.operations[operation_id] = replace(
            self.operations[operation_id],
            status=outcome.status,
            reason=outcome.reason,
            reviewed_at=outcome.reviewed_at,
        )


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider backed by dictionaries."""

    users: dict[str, Identity] = field(default_factory=dict)
    tokens: dict[str, Identity] = field(default_factory=dict)

    def resolve_caller(self, access_token: str) -> Identity | None:
        return self.tokens.get(access_token)

    def lookup_user(self, user_id: str) -> Identity | None:
        return self.users.get(user_id)


@dataclass
class Stack:
    """Services wired over in-memory repositories."""

    clock: FakeClock
    sessions: InMemorySessionRepository
    summaries: InMemorySummaryRepository
    attendance: InMemoryAttendanceRepository
    operations: InMemoryAdminOperationRepository
    identity: FakeIdentityProvider
    session_admin: SessionAdminService
    admission: AdmissionService
    audit: AuditService


def build_stack() -> Stack:
    clock = FakeClock()
    sessions = InMemorySessionRepository()
    summaries = InMemorySummaryRepository()
    attendance = InMemoryAttendanceRepository()
    operations = InMemoryAdminOperationRepository()
    identity = FakeIdentityProvider(
        users={ADMIN.user_id: ADMIN, STUDENT.user_id: STUDENT},
        tokens={
            "admin-token": ADMIN,
            "student-token": STUDENT,
            "other-student-token": OTHER_STUDENT,
        },
    )
    session_admin = SessionAdminService(
        session_repository=sessions,
        summary_repository=summaries,
        clock=clock,
    )
    admission = AdmissionService(
        attendance_repository=attendance,
        session_repository=sessions,
        aggregation_service=AggregationService(summaries),
        clock=clock,
    )
    audit = AuditService(
        operation_repository=operations,
        identity_provider=identity,
        admission_service=admission,
        clock=clock,
    )
    return Stack(
        clock=clock,
        sessions=sessions,
        summaries=summaries,
        attendance=attendance,
        operations=operations,
        identity=identity,
        session_admin=session_admin,
        admission=admission,
        audit=audit,
    )


def make_event(session_id: str | None, **overrides: object) -> AttendanceEvent:
    values: dict[str, object] = {
        "session_id": session_id,
        "status": "ENTRY",
        "hall_id": "H1",
        "student_id": "S1",
    }
    values.update(overrides)
    return AttendanceEvent(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def stack() -> Stack:
    return build_stack()


@pytest.fixture
def session_id(stack: Stack) -> str:
    return stack.session_admin.create_or_update_session(
        ADMIN, subject_code="CS101", hall_id="H1", start_at=1000, end_at=5000
    )


@pytest.fixture
def container(settings: Settings, stack: Stack) -> AppContainer:
    return AppContainer(
        settings=settings,
        identity_provider=stack.identity,
        session_admin_service=stack.session_admin,
        admission_service=stack.admission,
        audit_service=stack.audit,
    )
