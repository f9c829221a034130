"""
Maintenance API routes - inspect and drain the asset cleanup queue.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from student_registry.database import get_db
from student_registry.logging_config import get_logger, log_with_context
from student_registry.services.asset_cleanup import (
    DEFAULT_SWEEP_LIMIT, list_pending_cleanups, sweep_pending_cleanups
)
from student_registry.storage.base import AssetStore
from student_registry.storage.factory import get_asset_store

router = APIRouter()
logger = get_logger("http")


@router.get("/api/maintenance/asset-cleanup")
def list_asset_cleanup_tasks(
    limit: int = Query(DEFAULT_SWEEP_LIMIT, ge=1, le=1000, description="Max tasks to return"),
    db: Session = Depends(get_db),
):
    """List asset deletions waiting to be retried, oldest first."""
    tasks = list_pending_cleanups(db, limit)
    return {
        "data": [
            {
                "id": str(t.id),
                "asset_ref": t.asset_ref,
                "reason": t.reason,
                "attempts": t.attempts,
                "last_error": t.last_error,
                "created_at": t.created_at.isoformat() if t.created_at else None,
                "last_attempt_at": t.last_attempt_at.isoformat() if t.last_attempt_at else None,
            }
            for t in tasks
        ]
    }


@router.post("/api/maintenance/asset-cleanup/sweep")
def sweep_asset_cleanup_tasks(
    limit: int = Query(DEFAULT_SWEEP_LIMIT, ge=1, le=1000, description="Max tasks to retry"),
    db: Session = Depends(get_db),
    asset_store: AssetStore = Depends(get_asset_store),
):
    """Retry queued asset deletions."""
    result = sweep_pending_cleanups(db, asset_store, limit)
    log_with_context(logger, "INFO", "Asset cleanup sweep requested", extra_data=result)
    return result
