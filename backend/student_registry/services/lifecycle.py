"""
Student Lifecycle Service - create, read, update and delete student records.

This is where the identity constraints and the photo in object storage are
kept consistent with the stored record. Ordering rules:

1. Input is validated before any store is touched.
2. The uniqueness pre-check runs before any upload or write.
3. A new photo is uploaded BEFORE the record write that references it, so a
   persisted record never points at an object that does not exist. If the
   write then fails, the fresh upload is reclaimed.
4. An old photo is reclaimed only AFTER the record write that drops it has
   committed. Reclamation is best-effort and never fails the operation;
   failures are queued in asset_cleanup_tasks.

Concurrency note: the pre-check and the write are not atomic. Two concurrent
creates with the same email can both pass the check; the unique constraints
on the students table reject the second write, which is reported as the
same DuplicateIdentity.
"""

import json
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from student_registry.errors import DuplicateIdentity, NotFound, StudentRegistryError
from student_registry.logging_config import get_logger, log_with_context
from student_registry.models.student import Student
from student_registry.services.asset_cleanup import reclaim_asset
from student_registry.services.record_store import StudentStore
from student_registry.services.uniqueness import violates_uniqueness
from student_registry.services.validation import StudentFields, parse_student_fields, validate_image
from student_registry.storage.base import AssetStore
from student_registry.storage.refs import resolve_asset_ref

logger = get_logger("lifecycle")


class StudentLifecycle:
    """Orchestrates the record store, the uniqueness check and the asset store."""

    def __init__(self, db: Session, asset_store: AssetStore):
        self.db = db
        self.store = StudentStore(db)
        self.asset_store = asset_store

    # ── Reads ────────────────────────────────────────────────

    def list_students(self) -> List[Student]:
        return self.store.find()

    def get_student(self, student_id: str) -> Student:
        student = self.store.find_by_id(student_id)
        if student is None:
            raise NotFound(student_id)
        return student

    # ── Writes ───────────────────────────────────────────────

    def create_student(self, data: dict, image: Optional[bytes] = None) -> Student:
        """
        Create a student, optionally with a photo.

        Args:
            data: Raw field values (name, email, phone, studentId, address, subjects)
            image: Photo bytes, or None for no photo

        Raises:
            RecordValidationError, DuplicateIdentity, StoreUnavailable
        """
        fields = parse_student_fields(data)
        content_type = validate_image(image) if image is not None else None

        self._ensure_unique(fields)

        asset_ref = None
        image_url = None
        if image is not None:
            asset_ref = self.asset_store.upload(image, content_type)
            image_url = self.asset_store.url_for(asset_ref)

        student = Student(
            id=str(uuid.uuid4()),
            image_url=image_url,
            asset_ref=asset_ref,
            **self._columns(fields),
        )
        try:
            student = self.store.insert(student)
        except StudentRegistryError:
            if asset_ref:
                reclaim_asset(self.db, self.asset_store, asset_ref, "create_rollback")
            raise

        log_with_context(logger, "INFO", "Created student {}".format(student.student_id),
                         context={"student_id": student.id},
                         extra_data={"has_image": asset_ref is not None})
        return student

    def update_student(self, student_id: str, data: dict, image: Optional[bytes] = None) -> Student:
        """
        Replace a student's fields, swapping the photo when new bytes are given.

        Without image bytes the current photo is kept unchanged.

        Raises:
            RecordValidationError, NotFound, DuplicateIdentity, StoreUnavailable
        """
        fields = parse_student_fields(data)
        content_type = validate_image(image) if image is not None else None

        existing = self.get_student(student_id)
        self._ensure_unique(fields, exclude_id=student_id)

        values = self._columns(fields)
        old_ref = None
        new_ref = None
        if image is not None:
            old_ref = resolve_asset_ref(existing.asset_ref, existing.image_url,
                                        self.asset_store.config.folder)
            new_ref = self.asset_store.upload(image, content_type)
            values["asset_ref"] = new_ref
            values["image_url"] = self.asset_store.url_for(new_ref)

        try:
            student = self.store.replace(student_id, values)
        except StudentRegistryError:
            if new_ref:
                reclaim_asset(self.db, self.asset_store, new_ref, "update_rollback")
            raise

        if old_ref:
            reclaim_asset(self.db, self.asset_store, old_ref, "update")

        log_with_context(logger, "INFO", "Updated student {}".format(student.student_id),
                         context={"student_id": student_id},
                         extra_data={"image_replaced": new_ref is not None})
        return student

    def delete_student(self, student_id: str) -> None:
        """
        Delete a student and reclaim its photo.

        The row is removed first; the photo is then reclaimed best-effort.

        Raises:
            NotFound, StoreUnavailable
        """
        existing = self.get_student(student_id)
        asset_ref = resolve_asset_ref(existing.asset_ref, existing.image_url,
                                      self.asset_store.config.folder)

        self.store.delete(student_id)

        if asset_ref:
            reclaim_asset(self.db, self.asset_store, asset_ref, "delete")

        log_with_context(logger, "INFO", "Deleted student",
                         context={"student_id": student_id},
                         extra_data={"had_image": asset_ref is not None})

    # ── Helpers ──────────────────────────────────────────────

    def _ensure_unique(self, fields: StudentFields, exclude_id: Optional[str] = None):
        if violates_uniqueness(self.store, fields.email, fields.phone, fields.student_id,
                               exclude_id=exclude_id):
            log_with_context(logger, "WARNING", "Rejected duplicate identity",
                             context={"student_id": exclude_id},
                             extra_data={"student_external_id": fields.student_id})
            raise DuplicateIdentity()

    @staticmethod
    def _columns(fields: StudentFields) -> dict:
        return {
            "name": fields.name,
            "email": fields.email,
            "phone": fields.phone,
            "student_id": fields.student_id,
            "address": fields.address,
            "subjects": json.dumps(fields.subjects),
        }
