"""
Nutritionix passthrough (search, nutrients, measure conversion).

Bodies are the upstream JSON, with names/measures translated when DeepL is
configured. Upstream failures surface as {"error": ...} with the upstream
status, or 500 when the service is not configured or unreachable.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from mealtracker.deps import get_current_user
from mealtracker.models.user import User
from mealtracker.schemas.nutrition import (
    FoodMeasureRequest,
    FoodNutrientsRequest,
    FoodSearchRequest,
)
from mealtracker.services import food_lookup

router = APIRouter(prefix="/nutritionix", tags=["nutrition"])


@router.post("/search")
async def search(
    payload: FoodSearchRequest,
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    return await food_lookup.search_foods(payload.query)


@router.post("/nutrients")
async def nutrients(
    payload: FoodNutrientsRequest,
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    return await food_lookup.food_nutrients(payload.food_name)


@router.post("/measure")
async def measure(
    payload: FoodMeasureRequest,
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    return await food_lookup.food_measure(payload.food_name, payload.measure, payload.quantity)
