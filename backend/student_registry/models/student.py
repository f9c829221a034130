"""
Student model - the single record type managed by the registry.

Each student carries three independently unique identifying fields
(email, phone, student_id) and an optional photo stored in object storage.
The photo is addressed by both its public URL and its explicit asset_ref,
so deletion never has to re-derive the object key from the URL.
"""

import uuid
import json
from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, String, UniqueConstraint
from student_registry.database import Base


class Student(Base):
    """
    SQLAlchemy model for the students table.

    The unique constraints are the source of truth for identity uniqueness;
    the application-level check only exists to give a friendly error first.
    """
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="System-assigned opaque identifier, immutable once created")
    name = Column(Text, nullable=False,
                  doc="Student's full name")
    email = Column(Text, nullable=False,
                   doc="Email address, lower-cased, globally unique")
    phone = Column(String(10), nullable=False,
                   doc="10-digit phone number, globally unique")
    student_id = Column(Text, nullable=False,
                        doc="External student ID, globally unique")
    address = Column(Text, nullable=False,
                     doc="Postal address")
    subjects = Column(Text, nullable=False, default="[]",
                      doc="Ordered subject names as a JSON array")
    image_url = Column(Text, nullable=True,
                       doc="Public URL of the photo (NULL when there is no photo)")
    asset_ref = Column(Text, nullable=True,
                       doc="Object storage key of the photo")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        doc="Timestamp when the record was created")
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc),
                        doc="Timestamp of the last replace")

    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
        UniqueConstraint("phone", name="uq_students_phone"),
        UniqueConstraint("student_id", name="uq_students_student_id"),
    )

    @property
    def subjects_list(self):
        """Parse subjects JSON string to a list, preserving order."""
        if isinstance(self.subjects, list):
            return self.subjects
        try:
            return json.loads(self.subjects) if self.subjects else []
        except (json.JSONDecodeError, TypeError):
            return []

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', student_id='{self.student_id}')>"
