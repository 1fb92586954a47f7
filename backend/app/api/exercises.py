from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from app.api.auth import get_current_user
from app.errors import CatalogNotConfiguredError, UpstreamError
from app.models.user import User
from app.schemas.exercise_catalog import CatalogExercise
from app.services.exercise_catalog_service import ExerciseCatalogService, exercise_catalog_service

router = APIRouter(prefix="/exercises", tags=["exercises"])


def get_catalog() -> ExerciseCatalogService:
    return exercise_catalog_service


def _call(fetch, *args):
    try:
        return fetch(*args)
    except CatalogNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/search", response_model=List[CatalogExercise])
def search_exercises(
    name: str = Query(..., min_length=1),
    catalog: ExerciseCatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user)
):
    return _call(catalog.search_by_name, name)


@router.get("/bodyparts", response_model=List[str])
def list_body_parts(catalog: ExerciseCatalogService = Depends(get_catalog), current_user: User = Depends(get_current_user)):
    return _call(catalog.list_body_parts)


@router.get("/bodypart/{body_part}", response_model=List[CatalogExercise])
def list_by_body_part(
    body_part: str,
    catalog: ExerciseCatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user)
):
    return _call(catalog.list_by_body_part, body_part)


@router.get("/targets", response_model=List[str])
def list_targets(catalog: ExerciseCatalogService = Depends(get_catalog), current_user: User = Depends(get_current_user)):
    return _call(catalog.list_targets)


@router.get("/target/{target}", response_model=List[CatalogExercise])
def list_by_target(
    target: str,
    catalog: ExerciseCatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user)
):
    return _call(catalog.list_by_target, target)


@router.get("/equipments", response_model=List[str])
def list_equipments(catalog: ExerciseCatalogService = Depends(get_catalog), current_user: User = Depends(get_current_user)):
    return _call(catalog.list_equipments)


@router.get("/equipment/{equipment}", response_model=List[CatalogExercise])
def list_by_equipment(
    equipment: str,
    catalog: ExerciseCatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user)
):
    return _call(catalog.list_by_equipment, equipment)


# Declared last so the fixed paths above are matched first
@router.get("/{exercise_id}", response_model=CatalogExercise)
def read_exercise(
    exercise_id: str,
    catalog: ExerciseCatalogService = Depends(get_catalog),
    current_user: User = Depends(get_current_user)
):
    exercise = _call(catalog.get_exercise, exercise_id)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise
