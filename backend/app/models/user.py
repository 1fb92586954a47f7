from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, Enum, JSON
from sqlalchemy.orm import validates
from datetime import datetime

from app.database import Base
from app.models.enums import UserType, Gender


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(200), nullable=False)
    user_type = Column(Enum(UserType), nullable=False)

    age = Column(Integer, nullable=True)
    gender = Column(Enum(Gender), nullable=True)
    description = Column(Text, nullable=True)

    # Student body metrics
    height = Column(Numeric(5, 2), nullable=True)  # cm
    weight = Column(Numeric(5, 2), nullable=True)  # kg
    body_type = Column(String(50), nullable=True)
    health_conditions = Column(Text, nullable=True)
    goal = Column(Text, nullable=True)
    observations = Column(Text, nullable=True)

    # Instructor profile
    phone = Column(String(30), nullable=True)
    certifications = Column(Text, nullable=True)
    specializations = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    social_links = Column(JSON, nullable=True)  # {"instagram": "@user", "website": "..."}

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @validates('email')
    def normalize_email(self, key, email_value):
        # Emails are matched case-insensitively everywhere
        return email_value.strip().lower() if email_value else email_value

    @property
    def is_instructor(self) -> bool:
        return self.user_type == UserType.INSTRUCTOR

    @property
    def is_student(self) -> bool:
        return self.user_type == UserType.STUDENT
