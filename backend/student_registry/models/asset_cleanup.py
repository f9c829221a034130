"""
AssetCleanupTask model - durable queue of asset deletions that failed.

When reclaiming a photo from object storage fails, the record mutation still
goes ahead and the asset key lands here so a later sweep can finish the job.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, Integer, DateTime, String, Index
from student_registry.database import Base


class AssetCleanupTask(Base):
    """SQLAlchemy model for the asset_cleanup_tasks table."""
    __tablename__ = "asset_cleanup_tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique task identifier")
    asset_ref = Column(Text, nullable=False,
                       doc="Object storage key still waiting to be deleted")
    reason = Column(Text, nullable=False, default="",
                    doc="Which operation orphaned the asset (update, delete, create_rollback)")
    last_error = Column(Text, nullable=True,
                        doc="Error message from the most recent failed attempt")
    attempts = Column(Integer, nullable=False, default=1,
                      doc="Number of deletion attempts made so far")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        doc="When the first deletion attempt failed")
    last_attempt_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                             doc="When deletion was last attempted")

    __table_args__ = (
        Index("ix_asset_cleanup_tasks_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<AssetCleanupTask(id={self.id}, asset_ref='{self.asset_ref}', attempts={self.attempts})>"
