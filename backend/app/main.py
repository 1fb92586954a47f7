import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.database import engine, Base
import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.api import exercises, instructors, login, students, users, workouts
from config import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Ensure all tables exist
Base.metadata.create_all(bind=engine)
logger.info(f"[Startup] Database ready at {engine.url.render_as_string(hide_password=True)}")

app = FastAPI(title="Connect Workout API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(login.router)
app.include_router(users.router)
app.include_router(instructors.router)
app.include_router(students.router)
app.include_router(workouts.router)
app.include_router(exercises.router)


# Root endpoint
@app.get("/")
def root():
    return {
        "message": "Welcome to Connect Workout API",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}
