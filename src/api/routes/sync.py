"""Persistence sync endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_sync
from src.application.dto.responses import (
    SyncFailureResponse,
    SyncRetryResponse,
    SyncStatusResponse,
)
from src.application.sync import PersistenceSync

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.get("", response_model=SyncStatusResponse)
async def sync_status(sync: PersistenceSync = Depends(get_sync)) -> SyncStatusResponse:
    """Writes that failed and wait for a retry."""
    failure = sync.last_failure
    return SyncStatusResponse(
        backend=sync.persistence.__class__.__name__,
        pending_count=sync.pending_count,
        pending_operations=sync.pending_operations,
        last_failure=(
            SyncFailureResponse(
                operation=failure.operation,
                error=failure.error,
                attempts=failure.attempts,
                occurred_at=failure.occurred_at,
            )
            if failure
            else None
        ),
    )


@router.post("/retry", response_model=SyncRetryResponse)
async def retry_failed(sync: PersistenceSync = Depends(get_sync)) -> SyncRetryResponse:
    succeeded = await sync.retry_failed()
    return SyncRetryResponse(succeeded=succeeded, still_pending=sync.pending_count)
