"""
Record Store - persistence operations for student records.

Wraps a SQLAlchemy session with the six operations the lifecycle needs.
Every write is a single commit. Database failures are translated into the
registry's error kinds here so callers never see SQLAlchemy exceptions:

- a unique constraint violation becomes DuplicateIdentity (the race the
  pre-check cannot close is still caught by the database)
- anything else becomes StoreUnavailable("record")
"""

from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from student_registry.errors import DuplicateIdentity, NotFound, StoreUnavailable
from student_registry.logging_config import get_logger, log_with_context
from student_registry.models.student import Student

db_logger = get_logger("db")


def _is_unique_violation(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", PostgreSQL: "duplicate key value violates unique constraint"
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


class StudentStore:
    """Persistence abstraction over the students table."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str, student_id: Optional[str] = None):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e):
                log_with_context(db_logger, "WARNING",
                    "Unique constraint rejected {}".format(action),
                    context={"student_id": student_id})
                raise DuplicateIdentity() from e
            log_with_context(db_logger, "ERROR", "Integrity error during {}: {}".format(action, e),
                             context={"student_id": student_id})
            raise StoreUnavailable("record", str(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log_with_context(db_logger, "ERROR", "Database error during {}: {}".format(action, e),
                             context={"student_id": student_id})
            raise StoreUnavailable("record", str(e)) from e

    def find(self) -> List[Student]:
        with self._guard("find"):
            return self.db.query(Student).order_by(Student.created_at).all()

    def find_by_id(self, student_id: str) -> Optional[Student]:
        with self._guard("find_by_id", student_id):
            return self.db.query(Student).filter(Student.id == student_id).first()

    def find_one(self, email: str, phone: str, external_id: str,
                 exclude_id: Optional[str] = None) -> Optional[Student]:
        """First record matching email OR phone OR student_id, skipping exclude_id."""
        with self._guard("find_one", exclude_id):
            query = self.db.query(Student).filter(or_(
                Student.email == email,
                Student.phone == phone,
                Student.student_id == external_id,
            ))
            if exclude_id is not None:
                query = query.filter(Student.id != exclude_id)
            return query.first()

    def insert(self, student: Student) -> Student:
        with self._guard("insert", student.id):
            self.db.add(student)
            self.db.commit()
            self.db.refresh(student)
        log_with_context(db_logger, "DEBUG", "Inserted student row",
                         context={"student_id": student.id})
        return student

    def replace(self, student_id: str, values: dict) -> Student:
        """Overwrite the given columns of an existing row in one commit."""
        with self._guard("replace", student_id):
            student = self.db.query(Student).filter(Student.id == student_id).first()
            if student is None:
                raise NotFound(student_id)
            for column, value in values.items():
                setattr(student, column, value)
            self.db.commit()
            self.db.refresh(student)
        log_with_context(db_logger, "DEBUG", "Replaced student row",
                         context={"student_id": student_id},
                         extra_data={"columns": sorted(values)})
        return student

    def delete(self, student_id: str) -> None:
        with self._guard("delete", student_id):
            student = self.db.query(Student).filter(Student.id == student_id).first()
            if student is None:
                raise NotFound(student_id)
            self.db.delete(student)
            self.db.commit()
        log_with_context(db_logger, "DEBUG", "Deleted student row",
                         context={"student_id": student_id})
