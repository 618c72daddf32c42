"""
Meal endpoints. Every route resolves the caller first; the user id handed to
the repository always comes from the session, never from the request body.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mealtracker.deps import get_current_user, get_db
from mealtracker.models.user import User
from mealtracker.schemas.meal import (
    DATE_PATTERN,
    MONTH_PATTERN,
    MealImportRequest,
    MealImportResponse,
    MealIn,
    MealRead,
)
from mealtracker.schemas.user import MessageResponse
from mealtracker.services.meal_repository import MealRepository

router = APIRouter(prefix="/meals", tags=["meals"])


def get_meal_repository(db: Session = Depends(get_db)) -> MealRepository:
    return MealRepository(db)


@router.get("", response_model=List[MealRead])
def list_meals(
    date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="Exact day, YYYY-MM-DD"),
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Month prefix, YYYY-MM"),
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    return repo.list(user.id, date=date, month=month)


@router.post("", response_model=MealRead, status_code=status.HTTP_201_CREATED)
def create_meal(
    payload: MealIn,
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    return repo.create(user.id, payload)


@router.post("/import", response_model=MealImportResponse, status_code=status.HTTP_201_CREATED)
def import_meals(
    payload: MealImportRequest,
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    """All meals are stored for the current user in one transaction, or none are."""
    meals = repo.create_many(user.id, payload.meals)
    return MealImportResponse(
        message=f"Successfully imported {len(meals)} meals",
        meals=[MealRead.model_validate(meal) for meal in meals],
    )


@router.get("/{meal_id}", response_model=MealRead)
def get_meal(
    meal_id: int,
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    return repo.get(user.id, meal_id)


@router.put("/{meal_id}", response_model=MealRead)
def update_meal(
    meal_id: int,
    payload: MealIn,
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    return repo.update(user.id, meal_id, payload)


@router.delete("/{meal_id}", response_model=MessageResponse)
def delete_meal(
    meal_id: int,
    user: User = Depends(get_current_user),
    repo: MealRepository = Depends(get_meal_repository),
):
    repo.delete(user.id, meal_id)
    return MessageResponse(message="Meal deleted successfully")
