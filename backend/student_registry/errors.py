"""
Error hierarchy for student record operations.

Every failure an operation can report is a StudentRegistryError subclass
carrying a stable code and the HTTP status the API maps it to. Routes never
build error bodies themselves; the handlers registered in main.py turn these
into the {"error": {...}} envelope.
"""

from typing import Optional


class StudentRegistryError(Exception):
    """Base exception for all tagged operation failures."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[list] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        body = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return {"error": body}


class DuplicateIdentity(StudentRegistryError):
    """Email, phone or student ID already belongs to another record.

    The message never names the colliding field.
    """

    code = "DUPLICATE_IDENTITY"
    http_status = 400
    MESSAGE = "A student with the same email, phone, or student ID already exists."

    def __init__(self):
        super().__init__(self.MESSAGE)


class NotFound(StudentRegistryError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, student_id: str):
        super().__init__("Student not found")
        self.student_id = student_id


class RecordValidationError(StudentRegistryError):
    """Missing or malformed input, detected before any store is touched."""

    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, details: list, message: str = "Invalid student data"):
        super().__init__(message, details)


class StoreUnavailable(StudentRegistryError):
    """The record store or the asset store failed for infrastructure reasons."""

    code = "STORE_UNAVAILABLE"
    http_status = 503

    def __init__(self, store: str, reason: str = ""):
        super().__init__(f"The {store} store is currently unavailable")
        self.store = store
        self.reason = reason


class AssetStoreError(StoreUnavailable):
    """Raised by asset store adapters; the lifecycle decides whether it is fatal."""

    def __init__(self, reason: str = ""):
        super().__init__("asset", reason)
