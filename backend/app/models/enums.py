import enum


class UserType(str, enum.Enum):
    INSTRUCTOR = "Instructor"
    STUDENT = "Student"


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class InvitationStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class StatusType(str, enum.Enum):
    COMPLETED = "Completed"
    SKIPPED = "Skipped"


class DayOfWeek(enum.IntEnum):
    """Same numbering as date.weekday()."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6
