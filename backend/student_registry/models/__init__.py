from student_registry.models.student import Student
from student_registry.models.asset_cleanup import AssetCleanupTask

__all__ = ["Student", "AssetCleanupTask"]
