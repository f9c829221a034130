"""
Asset Cleanup Service - best-effort reclamation of orphaned photos.

Deleting a photo from object storage is never part of the decision a record
operation makes; by the time it runs, the record write has already happened.
So reclaim_asset() never raises, whatever the adapter throws. A failed
deletion is logged and written to the asset_cleanup_tasks table, and
sweep_pending_cleanups() retries those tasks later.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_registry.errors import AssetStoreError, StoreUnavailable
from student_registry.logging_config import get_logger, log_with_context
from student_registry.models.asset_cleanup import AssetCleanupTask
from student_registry.storage.base import AssetStore

logger = get_logger("cleanup")

DEFAULT_SWEEP_LIMIT = 100


def reclaim_asset(db: Session, asset_store: AssetStore, asset_ref: str, reason: str) -> bool:
    """
    Delete an asset, queueing it for retry if the delete fails.

    Args:
        db: Session used to persist the retry task
        asset_store: Store holding the asset
        asset_ref: Key of the asset to delete
        reason: Operation that orphaned the asset (update, delete, create_rollback, ...)

    Returns:
        True if the asset was deleted now, False if it was queued
    """
    try:
        asset_store.delete(asset_ref)
        log_with_context(logger, "INFO", "Reclaimed asset {}".format(asset_ref),
                         context={"asset_ref": asset_ref}, extra_data={"reason": reason})
        return True
    except AssetStoreError as e:
        log_with_context(logger, "ERROR", "Asset deletion failed, queueing for retry",
                         context={"asset_ref": asset_ref},
                         extra_data={"reason": reason, "error": e.reason})
        _enqueue(db, asset_ref, reason, e.reason)
        return False
    except Exception as e:
        # Adapters should raise AssetStoreError; anything else is queued the same way
        log_with_context(logger, "ERROR", "Unexpected error deleting asset, queueing for retry",
                         context={"asset_ref": asset_ref},
                         extra_data={"reason": reason, "error": str(e)}, exc_info=True)
        _enqueue(db, asset_ref, reason, str(e))
        return False


def _enqueue(db: Session, asset_ref: str, reason: str, error: str):
    task = AssetCleanupTask(asset_ref=asset_ref, reason=reason, last_error=error, attempts=1)
    try:
        db.add(task)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        # Nothing durable left to fall back on; the log line is the record
        log_with_context(logger, "ERROR", "Could not queue asset cleanup task",
                         context={"asset_ref": asset_ref},
                         extra_data={"reason": reason, "error": str(e)})


def list_pending_cleanups(db: Session, limit: int = DEFAULT_SWEEP_LIMIT) -> list:
    try:
        return (db.query(AssetCleanupTask)
                .order_by(AssetCleanupTask.created_at)
                .limit(limit)
                .all())
    except SQLAlchemyError as e:
        raise StoreUnavailable("record", str(e)) from e


def sweep_pending_cleanups(db: Session, asset_store: AssetStore,
                           limit: int = DEFAULT_SWEEP_LIMIT) -> dict:
    """
    Retry queued asset deletions, oldest first.

    Tasks whose deletion succeeds are removed; the others get their attempt
    counter and last error updated.

    Returns:
        Dict with attempted, reclaimed, failed and remaining counts
    """
    tasks = list_pending_cleanups(db, limit)
    reclaimed = 0
    failed = 0

    for task in tasks:
        try:
            asset_store.delete(task.asset_ref)
        except Exception as e:
            error = e.reason if isinstance(e, AssetStoreError) else str(e)
            failed += 1
            task.attempts += 1
            task.last_error = error
            task.last_attempt_at = datetime.now(timezone.utc)
            log_with_context(logger, "WARNING", "Retry of asset deletion failed",
                             context={"task_id": task.id, "asset_ref": task.asset_ref},
                             extra_data={"attempts": task.attempts, "error": error},
                             exc_info=not isinstance(e, AssetStoreError))
            continue
        reclaimed += 1
        db.delete(task)

    try:
        db.commit()
        remaining = db.query(AssetCleanupTask).count()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailable("record", str(e)) from e

    log_with_context(logger, "INFO",
        "Cleanup sweep: {} reclaimed, {} failed, {} remaining".format(reclaimed, failed, remaining),
        extra_data={"attempted": len(tasks)})

    return {
        "attempted": len(tasks),
        "reclaimed": reclaimed,
        "failed": failed,
        "remaining": remaining,
    }
