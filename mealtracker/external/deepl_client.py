"""
DeepL translation with graceful fallback.

Every function returns the original text whenever translation is not possible:
blank input, no API key, HTTP or network error, unexpected response.
"""
import logging
import re
from typing import Dict, Optional

import httpx

from mealtracker.core.config import settings

logger = logging.getLogger(__name__)

# Known serving measures, so the common ones never cost an API call.
COMMON_SERVING_MEASURES: Dict[str, str] = {
    "serving": "porção",
    "cup": "xícara",
    "cup, mashed": "xícara, amassado",
    "cup, sliced": "xícara, fatiado",
    'extra small (less than 6" long)': "extra pequeno (menos de 15 cm)",
    'small (6" to 6-7/8" long)': "pequeno (15 cm a 17,5 cm)",
    'medium (7" to 7-7/8" long)': "médio (17,5 cm a 20 cm)",
    'large (8" to 8-7/8" long)': "grande (20 cm a 22,5 cm)",
    'extra large (9" or longer)': "extra grande (23 cm ou mais)",
    "NLEA serving": "porção NLEA",
    "oz": "oz",
    "g": "g",
    "tbsp": "colher de sopa",
    "tsp": "colher de chá",
    "slice": "fatia",
    "piece": "pedaço",
    "whole": "inteiro",
    "package": "pacote",
    "container": "recipiente",
    "bottle": "garrafa",
    "can": "lata",
    "bowl": "tigela",
    "plate": "prato",
    "scoop": "concha",
    "handful": "punhado",
    "unit": "unidade",
    "medium": "médio",
    "large": "grande",
    "small": "pequeno",
}

# A single hit is taken as "already in this language".
COMMON_ENGLISH_WORDS = {"the", "a", "an", "and", "or", "but", "apple", "banana", "chicken"}
COMMON_PORTUGUESE_WORDS = {"o", "a", "os", "as", "e", "ou", "mas", "maçã", "banana", "frango"}


def _words(text: str) -> set:
    return set(re.split(r"\s+", text.lower().strip()))


def looks_english(text: str) -> bool:
    return bool(_words(text) & COMMON_ENGLISH_WORDS)


def looks_portuguese(text: str) -> bool:
    return bool(_words(text) & COMMON_PORTUGUESE_WORDS)


async def translate(
    text: str,
    source_lang: str,
    target_lang: str,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    if not text or not text.strip():
        return text

    api_key = settings.deepl_api_key
    if not api_key:
        logger.debug("DEEPL_API_KEY not set, skipping translation")
        return text

    payload = {"text": [text], "source_lang": source_lang, "target_lang": target_lang}
    headers = {"Authorization": f"DeepL-Auth-Key {api_key}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.external_timeout_seconds) as own_client:
                resp = await own_client.post(settings.deepl_api_url, json=payload, headers=headers)
        else:
            resp = await client.post(settings.deepl_api_url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Error calling DeepL API: {e}")
        return text

    if resp.status_code >= 400:
        logger.warning(f"DeepL API error ({resp.status_code}): {resp.text[:200]}")
        return text

    try:
        translations = resp.json().get("translations") or []
        translated = translations[0].get("text") if translations else None
    except (ValueError, AttributeError) as e:
        logger.warning(f"Unexpected DeepL response: {e}")
        return text

    return translated or text


async def translate_pt_to_en(text: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """Portuguese search terms to English for the nutrition catalog."""
    if not text or not text.strip():
        return text
    if looks_english(text):
        logger.debug("Text %r looks English already, skipping translation", text)
        return text
    return await translate(text, "PT", "EN", client=client)


async def translate_en_to_pt(text: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """Catalog names and measures back to Brazilian Portuguese."""
    if not text or not text.strip():
        return text
    if looks_portuguese(text):
        logger.debug("Text %r looks Portuguese already, skipping translation", text)
        return text
    if text in COMMON_SERVING_MEASURES:
        return COMMON_SERVING_MEASURES[text]
    return await translate(text, "EN", "PT-BR", client=client)


async def translate_serving_measure(measure: str, client: Optional[httpx.AsyncClient] = None) -> str:
    if measure in COMMON_SERVING_MEASURES:
        return COMMON_SERVING_MEASURES[measure]
    return await translate_en_to_pt(measure, client=client)
