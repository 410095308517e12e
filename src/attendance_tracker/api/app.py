"""FastAPI application factory."""

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status

from attendance_tracker.api.admin import router as admin_router
from attendance_tracker.api.models import AttendanceEventRequest
from attendance_tracker.app_logging import configure_logging
from attendance_tracker.containers import AppContainer
from attendance_tracker.domain.attendance import AttendanceEvent


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/attendance", status_code=status.HTTP_202_ACCEPTED)
    async def submit_attendance(
        body: AttendanceEventRequest,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> dict[str, str]:
        """Record an attendance event; admission runs after the response."""
        state_container: AppContainer = request.app.state.container
        admission = state_container.admission_service
        event_id = admission.record_event(
            AttendanceEvent(
                session_id=body.session_id,
                status=body.status,
                hall_id=body.hall_id,
                student_id=body.student_id,
                client_timestamp=body.client_timestamp,
            )
        )
        background_tasks.add_task(admission.admit_event, event_id)
        return {"eventId": event_id}

    @app.get("/sessions/{session_id}/summary")
    async def session_summary(session_id: str, request: Request) -> dict[str, object]:
        """Return the live counters for a session."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.session_admin_service.get_summary(session_id)
        if summary is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {
            "sessionId": summary.session_id,
            "counts": summary.counts,
            "uniquePresent": summary.unique_present,
            "completed": summary.completed,
            "updatedAt": summary.updated_at,
        }

    return app
