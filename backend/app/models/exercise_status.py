from sqlalchemy import Column, Integer, Date, ForeignKey, Enum, UniqueConstraint
from datetime import date

from app.database import Base
from app.models.enums import StatusType


class ExerciseStatus(Base):
    __tablename__ = "exercise_statuses"

    id = Column(Integer, primary_key=True, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    date = Column(Date, nullable=False, default=date.today)
    status = Column(Enum(StatusType), nullable=False)

    __table_args__ = (
        UniqueConstraint("exercise_id", "student_id", "date", name="uq_exercise_status_per_day"),
    )
