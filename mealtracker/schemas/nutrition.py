from typing import Optional

from pydantic import Field

from mealtracker.schemas.base import CamelModel


class FoodSearchRequest(CamelModel):
    query: str = Field(..., min_length=1)


class FoodNutrientsRequest(CamelModel):
    food_name: str = Field(..., min_length=1)


class FoodMeasureRequest(CamelModel):
    food_name: str = Field(..., min_length=1)
    measure: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
