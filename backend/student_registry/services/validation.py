"""
Input validation for student records.

Runs before any store is touched: field presence and shape through a
pydantic model, and image bytes through a magic-number check. Failures are
raised as RecordValidationError with one detail entry per bad field.
"""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from student_registry.errors import RecordValidationError

# ──────────────────────────────────────────────────────────────
# Image constraints
# ──────────────────────────────────────────────────────────────
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

# Allowed formats: jpg, jpeg, png (jpg and jpeg share a signature)
IMAGE_SIGNATURES = {
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"\xff\xd8\xff": "image/jpeg",
}


class StudentFields(BaseModel):
    """Validated writable fields of a student record."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., pattern=r"^\d{10}$")
    student_id: str = Field(..., min_length=1, alias="studentId")
    address: str = Field(..., min_length=1)
    subjects: List[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("subjects", mode="before")
    @classmethod
    def clean_subjects(cls, v):
        """Strip each subject and drop blanks; order and content are otherwise kept."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [s.strip() if isinstance(s, str) else s
                    for s in v if not (isinstance(s, str) and not s.strip())]
        return v


def parse_student_fields(data: dict) -> StudentFields:
    """
    Validate raw input into StudentFields.

    Args:
        data: Field values keyed by API name (studentId) or attribute name

    Returns:
        StudentFields with normalized values

    Raises:
        RecordValidationError: one or more fields are missing or malformed
    """
    cleaned = {k: v for k, v in data.items() if v is not None}
    try:
        return StudentFields.model_validate(cleaned)
    except ValidationError as e:
        raise RecordValidationError([
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ])


def validate_image(data: Optional[bytes]) -> str:
    """
    Check uploaded image bytes and return their MIME type.

    Raises:
        RecordValidationError: empty, oversized, or not a jpg/jpeg/png image
    """
    if not data:
        raise RecordValidationError(
            [{"field": "image", "message": "Image file is empty", "type": "value_error"}])
    if len(data) > MAX_IMAGE_BYTES:
        raise RecordValidationError(
            [{"field": "image",
              "message": "Image exceeds {} bytes".format(MAX_IMAGE_BYTES),
              "type": "value_error"}])
    for signature, content_type in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return content_type
    raise RecordValidationError(
        [{"field": "image", "message": "Only jpg, jpeg and png images are allowed",
          "type": "value_error"}])
