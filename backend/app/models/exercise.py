from sqlalchemy import Column, Integer, String, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class Exercise(Base):
    """An exercise prescribed on one workout day. Catalog fields are copied from ExerciseDB."""
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    workout_day_id = Column(Integer, ForeignKey("workout_days.id", ondelete="CASCADE"), nullable=False, index=True)

    # Catalog identity
    exercise_db_id = Column(String(50), nullable=True)
    name = Column(String(150), nullable=False)
    body_part = Column(String(50), nullable=True)     # e.g., chest, back
    equipment = Column(String(50), nullable=True)     # e.g., barbell
    gif_url = Column(String(255), nullable=True)

    # Prescription
    sets = Column(String(20), nullable=True)          # e.g. "3" or "3-4"
    repetitions = Column(String(20), nullable=True)   # e.g. "12", "8-12", "to failure"
    weight = Column(Numeric(6, 2), nullable=True)     # kg
    rest_seconds = Column(Integer, nullable=True)

    order = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    statuses = relationship("ExerciseStatus", cascade="all, delete-orphan")
