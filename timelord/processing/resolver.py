"""Resolve a single query term to its best matching city"""
from typing import Optional

from timelord.models.city import CityMatch, CityRecord
from timelord.services.city_index import CityIndex

import logging

logger = logging.getLogger(__name__)


def search_city(term: str, index: CityIndex) -> Optional[CityMatch]:
    """
    Find the highest ranked match for a term

    Args:
        term: Free-text query
        index: City index to search

    Returns:
        Best CityMatch, or None when nothing matches
    """
    matches = index.query(term)
    if not matches:
        logger.debug(f"No results found for '{term}'")
        return None

    best = matches[0]
    logger.debug(f"'{term}' matched {len(matches)} cities, best: {best.city.name} ({best.city.id}, score {best.score:.3f})")
    return best


def resolve(term: str, index: CityIndex) -> Optional[CityRecord]:
    """
    Resolve a term to a city

    A term that matches nothing is a normal outcome and returns None.

    Args:
        term: Free-text query
        index: City index to search

    Returns:
        Best matching CityRecord or None
    """
    best = search_city(term, index)
    return best.city if best else None
