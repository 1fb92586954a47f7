from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, Optional

from app.models.enums import UserType, Gender

EMAIL_REGX = r"^[^@]+@[^@]+\.[^@]+$"


# Schema for registering a user
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str = Field(..., min_length=6)
    user_type: UserType
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Gender] = None
    description: Optional[str] = None


# Schema for login (JSON body)
class UserLogin(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str


# Schema for updating the common profile; only provided fields change
class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Gender] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    certifications: Optional[str] = None
    specializations: Optional[str] = None
    bio: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    social_links: Optional[Dict[str, str]] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=6)


# Students replace their whole body-metrics profile at once
class StudentProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    body_type: Optional[str] = None
    health_conditions: Optional[str] = None
    goal: Optional[str] = None
    observations: Optional[str] = None


# Schema for returning user (without password)
class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    user_type: UserType
    age: Optional[int] = None
    gender: Optional[Gender] = None
    description: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    body_type: Optional[str] = None
    health_conditions: Optional[str] = None
    goal: Optional[str] = None
    observations: Optional[str] = None
    phone: Optional[str] = None
    certifications: Optional[str] = None
    specializations: Optional[str] = None
    bio: Optional[str] = None
    years_of_experience: Optional[int] = None
    social_links: Optional[Dict[str, str]] = None
    total_exercises_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Schema for register/login responses
class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


# Public card of an instructor as seen by students
class InstructorSummary(BaseModel):
    id: int
    name: str
    email: str
    description: str = ""
    student_count: int = 0
