# Import all models here so Base.metadata knows every table
from app.models.user import User
from app.models.student_instructor import StudentInstructor
from app.models.workout import Workout, WorkoutDay
from app.models.exercise import Exercise
from app.models.exercise_status import ExerciseStatus
