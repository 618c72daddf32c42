from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from mealtracker.schemas.base import CamelModel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
MONTH_PATTERN = r"^\d{4}-\d{2}$"


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


def _parse_meal_type(value):
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


def validate_date_string(value: str) -> str:
    # the pattern alone lets 2024-02-31 through
    datetime.strptime(value, "%Y-%m-%d")
    return value


class ServingIn(CamelModel):
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    original_unit: Optional[str] = None
    weight: float = Field(..., ge=0)


class ServingRead(ServingIn):
    id: int


class AltMeasureIn(CamelModel):
    serving_weight: float = Field(..., ge=0)
    measure: str = Field(..., min_length=1)
    original_measure: Optional[str] = None
    seq: Optional[int] = None
    qty: float = Field(..., ge=0)


class AltMeasureRead(AltMeasureIn):
    id: int


class MealIn(CamelModel):
    """Body of POST /meals and PUT /meals/{id}."""

    date: str = Field(..., pattern=DATE_PATTERN)
    name: str = Field(..., min_length=1)
    original_name: Optional[str] = None
    calories: float = Field(..., ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    meal_type: MealType
    food_id: Optional[str] = None
    image_url: Optional[str] = None
    serving: Optional[ServingIn] = None
    alt_measures: Optional[List[AltMeasureIn]] = None

    @field_validator("date")
    @classmethod
    def _real_date(cls, value: str) -> str:
        return validate_date_string(value)

    @field_validator("meal_type", mode="before")
    @classmethod
    def _normalize_meal_type(cls, value):
        return _parse_meal_type(value)

    @field_validator("protein", "carbs", "fat", mode="before")
    @classmethod
    def _missing_macro_is_zero(cls, value):
        return 0 if value is None else value


class MealRead(CamelModel):
    id: int
    user_id: int
    date: str
    name: str
    original_name: Optional[str] = None
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: MealType
    food_id: Optional[str] = None
    image_url: Optional[str] = None
    serving: Optional[ServingRead] = None
    alt_measures: List[AltMeasureRead] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("meal_type", mode="before")
    @classmethod
    def _normalize_meal_type(cls, value):
        return _parse_meal_type(value)


class MealImportRequest(CamelModel):
    """Body of POST /meals/import: meals kept elsewhere (e.g. the browser) moved into the account."""

    meals: List[MealIn] = Field(..., min_length=1)


class MealImportResponse(CamelModel):
    message: str
    meals: List[MealRead]
