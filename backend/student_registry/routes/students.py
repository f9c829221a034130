"""
Student API routes - thin HTTP layer over StudentLifecycle.

Endpoints take multipart form data (fields plus an optional ``image`` file)
the same way the web form posts them, hand the values to the lifecycle
service and serialize the resulting record. Errors raised by the service are
rendered by the handlers registered in main.py.
"""

import json
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.orm import Session

from student_registry.database import get_db
from student_registry.logging_config import get_logger, log_with_context
from student_registry.models.student import Student
from student_registry.services.lifecycle import StudentLifecycle
from student_registry.storage.base import AssetStore
from student_registry.storage.factory import get_asset_store

router = APIRouter()
logger = get_logger("http")


def get_lifecycle(db: Session = Depends(get_db),
                  asset_store: AssetStore = Depends(get_asset_store)) -> StudentLifecycle:
    return StudentLifecycle(db, asset_store)


def serialize_student(student: Student) -> dict:
    """Serialize a Student ORM object to a dict for API response."""
    return {
        "id": str(student.id),
        "name": student.name,
        "email": student.email,
        "phone": student.phone,
        "studentId": student.student_id,
        "address": student.address,
        "subjects": student.subjects_list,
        "image": student.image_url or "",
        "createdAt": student.created_at.isoformat() if student.created_at else None,
        "updatedAt": student.updated_at.isoformat() if student.updated_at else None,
    }


def _read_image(image: Optional[UploadFile]) -> Optional[bytes]:
    """Return uploaded bytes, or None when no file was chosen."""
    # Browsers send an empty part with no filename when the file input is blank
    if image is None or not image.filename:
        return None
    return image.file.read()


def decode_subjects(values: Optional[List[str]]) -> Optional[list]:
    """
    Turn the raw ``subjects`` form values into a list of subject names.

    The web form posts one field holding a JSON array string; other clients
    repeat the field once per subject. A single value that does not parse as
    a JSON array is one subject name, taken literally.
    """
    if values is None:
        return None
    if len(values) == 1:
        try:
            parsed = json.loads(values[0])
        except json.JSONDecodeError:
            return list(values)
        if isinstance(parsed, list):
            return [s if isinstance(s, str) else str(s) for s in parsed]
    return list(values)


def _form_fields(name, email, phone, student_id, address, subjects) -> dict:
    return {
        "name": name,
        "email": email,
        "phone": phone,
        "studentId": student_id,
        "address": address,
        "subjects": decode_subjects(subjects),
    }


@router.get("/students")
def list_students(lifecycle: StudentLifecycle = Depends(get_lifecycle)):
    """List all students."""
    start_time = time.time()
    students = lifecycle.list_students()

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Listed {} students".format(len(students)),
                     extra_data={"duration_ms": round(duration_ms, 2)})
    return [serialize_student(s) for s in students]


@router.get("/students/{student_id}")
def get_student(student_id: str, lifecycle: StudentLifecycle = Depends(get_lifecycle)):
    """Get a single student by ID."""
    return serialize_student(lifecycle.get_student(student_id))


@router.post("/students", status_code=201)
def create_student(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    studentId: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    subjects: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None),
    lifecycle: StudentLifecycle = Depends(get_lifecycle),
):
    """Create a student. ``subjects`` may be repeated fields or one JSON array string."""
    student = lifecycle.create_student(
        _form_fields(name, email, phone, studentId, address, subjects),
        _read_image(image),
    )
    return serialize_student(student)


@router.put("/students/{student_id}")
def update_student(
    student_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    studentId: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    subjects: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None),
    lifecycle: StudentLifecycle = Depends(get_lifecycle),
):
    """Replace a student's fields; a new ``image`` replaces the current photo."""
    student = lifecycle.update_student(
        student_id,
        _form_fields(name, email, phone, studentId, address, subjects),
        _read_image(image),
    )
    return serialize_student(student)


@router.delete("/students/{student_id}", status_code=204)
def delete_student(student_id: str, lifecycle: StudentLifecycle = Depends(get_lifecycle)):
    """Delete a student and its photo."""
    lifecycle.delete_student(student_id)
    return Response(status_code=204)
