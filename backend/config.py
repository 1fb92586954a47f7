import os
from dotenv import load_dotenv

# Values already exported in the environment win over .env
load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./connect_workout.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")  # Use a strong random string
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# External exercise catalog (ExerciseDB on RapidAPI)
EXERCISEDB_API_KEY = os.getenv("EXERCISEDB_API_KEY")
EXERCISEDB_BASE_URL = os.getenv("EXERCISEDB_BASE_URL", "https://exercisedb.p.rapidapi.com")
EXERCISEDB_CACHE_MINUTES = int(os.getenv("EXERCISEDB_CACHE_MINUTES", "1440"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
