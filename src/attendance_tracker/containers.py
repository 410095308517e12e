"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from attendance_tracker.adapters.supabase_admin_operation_repository import (
    SupabaseAdminOperationRepository,
)
from attendance_tracker.adapters.supabase_attendance_repository import (
    SupabaseAttendanceRepository,
)
from attendance_tracker.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from attendance_tracker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from attendance_tracker.adapters.supabase_summary_repository import (
    SupabaseSummaryRepository,
)
from attendance_tracker.config import Settings, grace_period_ms
from attendance_tracker.services.admission import AdmissionService
from attendance_tracker.services.aggregation import AggregationService
from attendance_tracker.services.audit import AuditService
from attendance_tracker.services.identity import IdentityProvider
from attendance_tracker.services.sessions import SessionAdminService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    session_admin_service: SessionAdminService
    admission_service: AdmissionService
    audit_service: AuditService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    summary_repository = SupabaseSummaryRepository(
        supabase_client, max_retries=resolved_settings.summary_max_retries
    )
    attendance_repository = SupabaseAttendanceRepository(supabase_client)
    operation_repository = SupabaseAdminOperationRepository(supabase_client)
    identity_provider = SupabaseIdentityProvider(supabase_client)

    session_admin_service = SessionAdminService(
        session_repository=session_repository,
        summary_repository=summary_repository,
    )
    admission_service = AdmissionService(
        attendance_repository=attendance_repository,
        session_repository=session_repository,
        aggregation_service=AggregationService(summary_repository),
        grace_period_ms=grace_period_ms(resolved_settings),
    )
    audit_service = AuditService(
        operation_repository=operation_repository,
        identity_provider=identity_provider,
        admission_service=admission_service,
    )

    return AppContainer(
        settings=resolved_settings,
        identity_provider=identity_provider,
        session_admin_service=session_admin_service,
        admission_service=admission_service,
        audit_service=audit_service,
    )
