"""Admin API endpoints authenticated with Supabase access tokens."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    Header,
    HTTPException,
    Request,
    status,
)

from attendance_tracker.api.models import (
    AdminOperationRequest,
    LockRequest,
    SessionUpsertRequest,
)
from attendance_tracker.domain.admin_ops import AdminOperation
from attendance_tracker.domain.errors import (
    InvalidArgumentError,
    PermissionDeniedError,
)
from attendance_tracker.domain.identity import Identity

if TYPE_CHECKING:
    from attendance_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])

_logger = logging.getLogger(__name__)


async def get_caller(
    request: Request, authorization: str | None = Header(default=None)
) -> Identity:
    """Resolve the bearer token into an identity."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    container: AppContainer = request.app.state.container
    try:
        caller = container.identity_provider.resolve_caller(token)
    except Exception:
        _logger.warning("Failed to resolve caller token", exc_info=True)
        caller = None
    if caller is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return caller


@router.post("/sessions")
async def create_or_update_session(
    body: SessionUpsertRequest,
    request: Request,
    caller: Identity = Depends(get_caller),
) -> dict[str, str]:
    """Create or update a session and bootstrap its summary."""
    container: AppContainer = request.app.state.container
    try:
        session_id = container.session_admin_service.create_or_update_session(
            caller,
            session_id=body.session_id,
            subject_code=body.subject_code,
            subject_name=body.subject_name,
            hall_id=body.hall_id,
            start_at=body.start_at,
            end_at=body.end_at,
        )
    except PermissionDeniedError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"sessionId": session_id}


@router.post("/sessions/{session_id}/lock")
async def lock_session(
    session_id: str,
    body: LockRequest,
    request: Request,
    caller: Identity = Depends(get_caller),
) -> dict[str, bool]:
    """Lock or unlock a session."""
    container: AppContainer = request.app.state.container
    try:
        container.session_admin_service.lock_session(caller, session_id, body.locked)
    except PermissionDeniedError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InvalidArgumentError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"ok": True}


@router.post("/ops", status_code=status.HTTP_202_ACCEPTED)
async def submit_operation(
    body: AdminOperationRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    caller: Identity = Depends(get_caller),
) -> dict[str, str]:
    """Queue a privileged operation for review by the audit pipeline."""
    container: AppContainer = request.app.state.container
    operation_id = container.audit_service.submit_operation(
        AdminOperation(
            type=body.type,
            requester_id=caller.user_id,
            requested_by=body.requested_by,
            session_id=body.session_id,
            payload=body.payload,
        )
    )
    background_tasks.add_task(container.audit_service.process_operation, operation_id)
    return {"operationId": operation_id}


@router.get("/ops/{operation_id}")
async def get_operation(
    operation_id: str,
    request: Request,
    caller: Identity = Depends(get_caller),
) -> dict[str, object]:
    """Return an operation and its review outcome to its requester or an admin."""
    container: AppContainer = request.app.state.container
    operation = container.audit_service.get_operation(operation_id)
    if operation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    if not caller.is_admin and caller.user_id != operation.requester_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return {
        "id": operation.id,
        "type": operation.type,
        "sessionId": operation.session_id,
        "requestedBy": operation.requested_by,
        "status": operation.status,
        "reason": operation.reason,
        "reviewedAt": operation.reviewed_at,
    }
