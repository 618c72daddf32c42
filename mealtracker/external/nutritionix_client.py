"""
Nutritionix API client: instant food search and natural-language nutrients.

The responses are passed through as opaque JSON; callers only rely on
`common` / `branded` / `foods` lists and the `food_name` / `alt_measures`
fields that translation touches.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from mealtracker.core.config import settings
from mealtracker.core.errors import UpstreamError

logger = logging.getLogger(__name__)

SEARCH_INSTANT_PATH = "/search/instant"
NATURAL_NUTRIENTS_PATH = "/natural/nutrients"


def _credentials() -> Dict[str, str]:
    app_id = settings.nutritionix_app_id
    api_key = settings.nutritionix_api_key
    if not app_id or not api_key:
        logger.error("Missing Nutritionix API credentials")
        raise UpstreamError("API configuration error", status_code=500)
    return {"x-app-id": app_id, "x-app-key": api_key}


def build_measure_query(
    food_name: str,
    measure: Optional[str] = None,
    quantity: Optional[float] = None,
) -> str:
    """
    "2 cup rice" style query for the natural endpoint.
    Only when both measure and quantity are given; otherwise the bare food name.
    """
    if measure and quantity:
        qty = int(quantity) if float(quantity).is_integer() else quantity
        return f"{qty} {measure} {food_name}"
    return food_name


async def _post(
    path: str,
    payload: Dict[str, Any],
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    headers = _credentials()
    url = f"{settings.nutritionix_base_url}{path}"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.external_timeout_seconds) as own_client:
                resp = await own_client.post(url, json=payload, headers=headers)
        else:
            resp = await client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Error calling Nutritionix {path}: {e}")
        raise UpstreamError("Failed to reach the nutrition service", status_code=500)

    if resp.status_code >= 400:
        try:
            message = resp.json().get("message")
        except (ValueError, AttributeError):
            # non-JSON body, or JSON that is not an object
            message = None
        logger.error(f"Nutritionix {path} returned {resp.status_code}: {message or resp.text[:200]}")
        raise UpstreamError(
            message or "Failed to fetch data from Nutritionix",
            status_code=resp.status_code,
        )

    try:
        return resp.json()
    except ValueError:
        logger.error(f"Nutritionix {path} returned a non-JSON body")
        raise UpstreamError("Invalid response from the nutrition service", status_code=500)


async def search_instant(query: str, client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
    """POST /search/instant: food name autocomplete (`common` and `branded` lists)."""
    logger.debug("Nutritionix instant search: %s", query)
    return await _post(SEARCH_INSTANT_PATH, {"query": query}, client=client)


async def natural_nutrients(query: str, client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
    """POST /natural/nutrients: full nutrition (`foods` list) for a free-text query."""
    logger.debug("Nutritionix nutrients: %s", query)
    return await _post(NATURAL_NUTRIENTS_PATH, {"query": query}, client=client)
