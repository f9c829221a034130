"""
Uniqueness check for the three identifying fields of a student.

A record collides when ANY of email, phone or student ID matches another
record. The check does not report which field collided; callers surface a
single generic DuplicateIdentity.

This is a pre-check only. Two concurrent writes can both pass it, and the
unique constraints on the students table are what finally reject the loser
(see StudentStore).
"""

from typing import Optional

from student_registry.logging_config import get_logger, log_with_context
from student_registry.services.record_store import StudentStore

logger = get_logger("lifecycle")


def violates_uniqueness(store: StudentStore, email: str, phone: str, external_id: str,
                        exclude_id: Optional[str] = None) -> bool:
    """
    Check whether another record already uses any of the identifying fields.

    Args:
        store: Record store to query
        email: Candidate email
        phone: Candidate phone
        external_id: Candidate student ID
        exclude_id: Record to ignore (the record being updated)

    Returns:
        True iff at least one other record matches
    """
    existing = store.find_one(email, phone, external_id, exclude_id=exclude_id)
    if existing is None:
        return False

    log_with_context(logger, "DEBUG", "Identity collision found",
                     context={"conflicting_student_id": existing.id, "exclude_id": exclude_id})
    return True
