"""Field validation - tests for parse_student_fields and validate_image.

Tests cover:
    - Required fields and their error details
    - Phone shape, email normalization
    - subjects list kept element-for-element (stripped, blanks dropped)
    - Image format detection and size limits
"""

import pytest

from student_registry.errors import RecordValidationError
from student_registry.services import validation
from student_registry.services.validation import parse_student_fields, validate_image
from tests.conftest import JPEG_BYTES, PNG_BYTES, student_data


def _error_fields(exc_info):
    return {d["field"] for d in exc_info.value.details}


def test_valid_fields_are_normalized():
    fields = parse_student_fields(student_data(name="  Ada  ", email="Ada@X.com"))
    assert fields.name == "Ada"
    assert fields.email == "ada@x.com"
    assert fields.student_id == "S1"


def test_missing_required_fields_are_reported():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields({"name": "Ada"})
    assert {"email", "phone", "studentId", "address"} <= _error_fields(exc_info)


def test_none_values_count_as_missing():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields(student_data(address=None))
    assert _error_fields(exc_info) == {"address"}


def test_blank_name_is_rejected():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields(student_data(name="   "))
    assert _error_fields(exc_info) == {"name"}


@pytest.mark.parametrize("phone", ["12345", "12345678901", "12345abcde", "123-456-7890"])
def test_phone_must_be_ten_digits(phone):
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields(student_data(phone=phone))
    assert _error_fields(exc_info) == {"phone"}


def test_malformed_email_is_rejected():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields(student_data(email="not-an-email"))
    assert _error_fields(exc_info) == {"email"}


def test_subjects_default_to_empty():
    data = student_data()
    del data["subjects"]
    assert parse_student_fields(data).subjects == []


def test_subjects_list_keeps_order_and_drops_blanks():
    fields = parse_student_fields(student_data(subjects=["Math", " ", " Science "]))
    assert fields.subjects == ["Math", "Science"]


def test_single_subject_with_comma_is_kept_whole():
    fields = parse_student_fields(student_data(subjects=["Algorithms, Data Structures"]))
    assert fields.subjects == ["Algorithms, Data Structures"]


def test_single_subject_with_brackets_is_kept_whole():
    fields = parse_student_fields(student_data(subjects=["[Honors] Biology"]))
    assert fields.subjects == ["[Honors] Biology"]


def test_non_list_subjects_are_rejected():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_student_fields(student_data(subjects="Math, Science"))
    assert _error_fields(exc_info) == {"subjects"}


def test_png_and_jpeg_are_detected():
    assert validate_image(PNG_BYTES) == "image/png"
    assert validate_image(JPEG_BYTES) == "image/jpeg"


def test_empty_image_is_rejected():
    with pytest.raises(RecordValidationError):
        validate_image(b"")


def test_unsupported_image_format_is_rejected():
    with pytest.raises(RecordValidationError) as exc_info:
        validate_image(b"GIF89a" + b"\x00" * 10)
    assert "jpg, jpeg and png" in exc_info.value.details[0]["message"]


def test_oversized_image_is_rejected(monkeypatch):
    monkeypatch.setattr(validation, "MAX_IMAGE_BYTES", 16)
    with pytest.raises(RecordValidationError):
        validate_image(PNG_BYTES)
