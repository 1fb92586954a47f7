from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, Index, text
from datetime import datetime

from app.database import Base
from app.models.enums import InvitationStatus


class StudentInstructor(Base):
    """
    Relationship record between one student and one instructor.
    Starts as an invitation (PENDING) and is answered by the student.
    """
    __tablename__ = "student_instructors"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    instructor_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    status = Column(Enum(InvitationStatus), nullable=False, default=InvitationStatus.PENDING)
    invited_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    responded_at = Column(DateTime, nullable=True)
    connected_at = Column(DateTime, nullable=True)  # Only set on accept

    # At most one open invitation and one live connection per pair.
    # Rejected rows are history and never block a new invite.
    __table_args__ = (
        Index(
            "uq_student_instructor_pending",
            "student_id", "instructor_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
        Index(
            "uq_student_instructor_accepted",
            "student_id", "instructor_id",
            unique=True,
            sqlite_where=text("status = 'ACCEPTED'"),
            postgresql_where=text("status = 'ACCEPTED'"),
        ),
    )
