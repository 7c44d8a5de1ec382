# services/plant_info.py
import logging
import os
from datetime import datetime, timedelta
from typing import Dict, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.plant_info_cache import PlantInfoCache
from services.exceptions import PlantCareError

logger = logging.getLogger(__name__)

WIKIPEDIA_API_BASE = "https://en.wikipedia.org/w/api.php"
PERENUAL_API_URL = "https://perenual.com/api/species-list"
CACHE_DURATION = timedelta(days=7)

DEFAULT_CARE_INSTRUCTIONS: Dict[str, Dict[str, str]] = {
    "default": {
        "light": "Moderate to bright indirect light",
        "water": "Water when top 1-2 inches of soil feels dry",
        "soil": "Well-draining potting mix",
        "temperature": "65-80°F (18-27°C)",
        "humidity": "Average household humidity (40-60%)",
        "fertilizer": "Balanced fertilizer every 4-6 weeks during growing season",
        "propagation": "Depends on plant type",
    },
    "succulent": {
        "light": "Bright direct to indirect light",
        "water": "Allow soil to dry completely between waterings",
        "soil": "Fast-draining cactus/succulent mix",
        "temperature": "70-80°F (21-27°C)",
        "humidity": "Low humidity tolerant",
        "fertilizer": "Diluted cactus fertilizer during growing season",
        "propagation": "Leaf cuttings or offsets",
    },
    "tropical": {
        "light": "Bright indirect light",
        "water": "Keep soil consistently moist but not wet",
        "soil": "Rich, well-draining potting mix",
        "temperature": "70-85°F (21-29°C)",
        "humidity": "High humidity (60% or higher)",
        "fertilizer": "Balanced fertilizer monthly during growing season",
        "propagation": "Stem cuttings or division",
    },
    "herb": {
        "light": "Full sun to partial shade",
        "water": "Regular watering, keep soil moist",
        "soil": "Well-draining herb potting mix",
        "temperature": "65-70°F (18-21°C)",
        "humidity": "Moderate humidity",
        "fertilizer": "Light feeding with balanced fertilizer",
        "propagation": "Seeds or stem cuttings",
    },
}

# keyword -> care table entry, checked in order
PLANT_TYPE_KEYWORDS = [
    (("succulent", "cactus"), "succulent"),
    (("herb", "mint", "basil"), "herb"),
    (("monstera", "philodendron", "pothos"), "tropical"),
]


class PlantInfoUnavailable(PlantCareError):
    """No usable article was found for the species"""


# -------------------------
# helpers
# -------------------------
def _timeout() -> float:
    return float(os.getenv("PLANT_INFO_TIMEOUT", "10"))


def normalize_search_term(species: str) -> str:
    return species.strip().lower()


def care_for_species(species: str) -> Dict[str, str]:
    species_lower = species.lower()
    for keywords, plant_type in PLANT_TYPE_KEYWORDS:
        if any(k in species_lower for k in keywords):
            return dict(DEFAULT_CARE_INSTRUCTIONS[plant_type])
    return dict(DEFAULT_CARE_INSTRUCTIONS["default"])


def default_plant_info(species: str) -> Dict:
    return {
        "summary": f"Information about {species} is currently unavailable.",
        "image_url": None,
        "scientific_name": species,
        "family": None,
        "care": care_for_species(species),
    }


# -------------------------
# external APIs
# -------------------------
def fetch_wikipedia_article(search_term: str) -> Dict[str, Optional[str]]:
    """
    Search Wikipedia for the plant and return the best match's
    title, intro extract and thumbnail url.
    """
    search = requests.get(
        WIKIPEDIA_API_BASE,
        params={
            "action": "query",
            "list": "search",
            "srsearch": f"{search_term} plant",
            "format": "json",
            "utf8": 1,
        },
        timeout=_timeout(),
    )
    search.raise_for_status()
    results = search.json().get("query", {}).get("search", [])
    if not results:
        raise PlantInfoUnavailable(f"No Wikipedia article found for {search_term!r}")

    page_title = results[0]["title"]

    content = requests.get(
        WIKIPEDIA_API_BASE,
        params={
            "action": "query",
            "prop": "extracts|pageimages",
            "exintro": 1,
            "explaintext": 1,
            "piprop": "thumbnail",
            "pithumbsize": 500,
            "titles": page_title,
            "format": "json",
            "utf8": 1,
        },
        timeout=_timeout(),
    )
    content.raise_for_status()
    pages = content.json()["query"]["pages"]
    page = next(iter(pages.values()))

    return {
        "title": page.get("title", page_title),
        "extract": page.get("extract") or "No description available.",
        "thumbnail": (page.get("thumbnail") or {}).get("source"),
    }


def fetch_perenual_care(search_term: str, api_key: str) -> Optional[Dict[str, str]]:
    """sunlight/watering hints from Perenual, or None when the species is unknown"""
    response = requests.get(
        PERENUAL_API_URL,
        params={"key": api_key, "q": search_term},
        timeout=_timeout(),
    )
    response.raise_for_status()
    data = response.json().get("data") or []
    if not data:
        return None

    plant = data[0]
    care = {}
    if plant.get("sunlight"):
        care["light"] = ", ".join(plant["sunlight"])
    if plant.get("watering"):
        care["water"] = plant["watering"]
    return care


def fetch_plant_info(search_term: str) -> Dict:
    article = fetch_wikipedia_article(search_term)

    care = care_for_species(search_term)
    api_key = os.getenv("PERENUAL_API_KEY")
    if api_key:
        try:
            care.update(fetch_perenual_care(search_term, api_key) or {})
        except (requests.RequestException, ValueError) as e:
            logger.warning("Perenual lookup failed for %r: %s", search_term, e)

    return {
        "summary": article["extract"],
        "image_url": article["thumbnail"],
        "scientific_name": article["title"],
        "family": None,
        "care": care,
    }


# -------------------------
# cache
# -------------------------
def _store(db: Session, search_term: str, info: Dict, now: datetime) -> None:
    try:
        entry = db.get(PlantInfoCache, search_term)
        if entry is None:
            db.add(PlantInfoCache(search_term=search_term, info=info, last_updated=now))
        else:
            entry.info = info
            entry.last_updated = now
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Could not cache plant information for %r: %s", search_term, e)


def get_plant_info(db: Session, species: str, now: Optional[datetime] = None) -> Dict:
    """
    Care information for a species. Served from the cache while it is younger
    than CACHE_DURATION; lookup failures fall back to type-based defaults,
    which are cached as well so a failing API is not hit on every request.
    """
    now = now or datetime.utcnow()
    search_term = normalize_search_term(species)

    cached = db.get(PlantInfoCache, search_term)
    if cached is not None and now - cached.last_updated < CACHE_DURATION:
        logger.debug("Returning cached plant information for %r", search_term)
        return cached.info

    logger.info("Fetching fresh plant information for %r", search_term)
    try:
        info = fetch_plant_info(search_term)
    except (requests.RequestException, PlantInfoUnavailable, KeyError, ValueError) as e:
        logger.warning("Plant information lookup failed for %r: %s", search_term, e)
        info = default_plant_info(species)

    _store(db, search_term, info, now)
    return info
