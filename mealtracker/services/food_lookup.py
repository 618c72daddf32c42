"""
Food lookup: Nutritionix search/nutrients with PT<->EN translation around it.

Queries go out in English, names and measures come back in Portuguese with the
English original kept next to them (`original_food_name`, `original_measure`)
so a logged meal can store both. Translation never fails a lookup.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from mealtracker.core.config import settings
from mealtracker.external import deepl_client, nutritionix_client

logger = logging.getLogger(__name__)

SEARCH_LISTS = ("common", "branded")


async def _translate_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return name
    return await deepl_client.translate_en_to_pt(name)


async def translate_food_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not items:
        return items

    names = [item.get("food_name") for item in items]
    translated = await asyncio.gather(*(_translate_name(name) for name in names))

    result = []
    for item, name, new_name in zip(items, names, translated):
        if name and new_name:
            item = {**item, "original_food_name": name, "food_name": new_name}
        result.append(item)
    return result


async def translate_alt_measures(measures: Optional[List[Dict[str, Any]]]) -> Optional[List[Dict[str, Any]]]:
    if not measures:
        return measures

    async def _one(measure: Dict[str, Any]) -> Dict[str, Any]:
        original = measure.get("measure")
        if not original:
            return measure
        translated = await deepl_client.translate_serving_measure(original)
        return {**measure, "original_measure": original, "measure": translated}

    return list(await asyncio.gather(*(_one(m) for m in measures)))


async def _translate_foods(data: Dict[str, Any]) -> Dict[str, Any]:
    foods = data.get("foods")
    if not isinstance(foods, list):
        return data

    translated_foods = []
    for food in await translate_food_items(foods):
        alt = food.get("alt_measures")
        if isinstance(alt, list):
            food = {**food, "alt_measures": await translate_alt_measures(alt)}
        translated_foods.append(food)
    return {**data, "foods": translated_foods}


async def search_foods(query: str) -> Dict[str, Any]:
    """Instant search; `common` and `branded` names translated when translation is on."""
    if not settings.translation_enabled:
        return await nutritionix_client.search_instant(query)

    english_query = await deepl_client.translate_pt_to_en(query)
    if english_query != query:
        logger.info("Search query translated: %r -> %r", query, english_query)

    data = await nutritionix_client.search_instant(english_query)
    for key in SEARCH_LISTS:
        if isinstance(data.get(key), list):
            data[key] = await translate_food_items(data[key])
    return data


async def food_nutrients(food_name: str) -> Dict[str, Any]:
    if not settings.translation_enabled:
        return await nutritionix_client.natural_nutrients(food_name)

    english_name = await deepl_client.translate_pt_to_en(food_name)
    data = await nutritionix_client.natural_nutrients(english_name)
    return await _translate_foods(data)


async def food_measure(
    food_name: str,
    measure: Optional[str] = None,
    quantity: Optional[float] = None,
) -> Dict[str, Any]:
    """Nutrients for a quantity in a given measure, e.g. (rice, cup, 2)."""
    query = nutritionix_client.build_measure_query(food_name, measure, quantity)
    logger.info("Querying Nutritionix with: %s", query)
    data = await nutritionix_client.natural_nutrients(query)
    if not settings.translation_enabled:
        return data
    return await _translate_foods(data)
