"""Main processing pipeline for city time lookups"""
from datetime import datetime
from typing import List, Optional

from timelord.models.config import Config
from timelord.models.reference import ReferenceTables
from timelord.models.result import EnrichedResult
from timelord.processing.dispatcher import resolve_all, split_terms
from timelord.processing.enrichment import enrich_all
from timelord.services.city_index import CityIndex, open_or_build
from timelord.services.reference_data import load_reference_tables

import logging

logger = logging.getLogger(__name__)


def run_city_lookup_pipeline(config: Config, query: str, now: Optional[datetime] = None) -> List[EnrichedResult]:
    """
    Execute the complete lookup pipeline.

    This is the main orchestrator that coordinates all processing steps:
    1. Initialize services (city index, reference tables)
    2. Split the query into terms
    3. Resolve all terms concurrently
    4. Enrich every resolved city with local time, country data and airports

    Dataset and index errors propagate; misses and per-field gaps do not.

    Args:
        config: Application configuration
        query: Comma-separated query terms
        now: Reference instant for local times (defaults to now)

    Returns:
        List of result items, one per resolved term
    """
    logger.info("Starting city lookup pipeline")
    logger.debug(f"Query: {query!r}")

    services = initialize_services(config)

    terms = split_terms(query)
    cities = resolve_query_terms(terms, services['city_index'], config)

    if not cities:
        logger.warning("No cities matched the query")
        return []

    results = enrich_cities(cities, services['reference_tables'], config, now)

    logger.info(f"Pipeline completed successfully. Generated {len(results)} result items")
    return results


def initialize_services(config: Config) -> dict:
    """
    Initialize all required services.

    Args:
        config: Application configuration

    Returns:
        Dictionary containing initialized services:
        - 'city_index': CityIndex, built on first use
        - 'reference_tables': ReferenceTables
    """
    logger.debug("Initializing services...")

    city_index = open_or_build(config)
    reference_tables = load_reference_tables(config)

    logger.debug("Services initialized successfully")

    return {
        'city_index': city_index,
        'reference_tables': reference_tables
    }


def resolve_query_terms(terms: List[str], city_index: CityIndex, config: Config) -> list:
    """
    Resolve query terms to cities concurrently.

    Args:
        terms: Query terms
        city_index: City index to search
        config: Application configuration (workers, timeout, ordering)

    Returns:
        Resolved CityRecord objects; unmatched terms are left out
    """
    logger.debug(f"Resolving {len(terms)} query terms...")

    cities = resolve_all(
        terms,
        city_index,
        max_workers=config.max_workers,
        timeout=config.timeout,
        preserve_order=config.preserve_order
    )

    logger.debug(f"{len(cities)} of {len(terms)} terms resolved to a city")
    return cities


def enrich_cities(
    cities: list,
    reference_tables: ReferenceTables,
    config: Config,
    now: Optional[datetime] = None
) -> List[EnrichedResult]:
    """
    Build result items for resolved cities.

    Args:
        cities: Resolved CityRecord objects
        reference_tables: Static lookup tables
        config: Application configuration (flag icon locations)
        now: Reference instant for local times

    Returns:
        List of EnrichedResult objects
    """
    logger.debug("Enriching resolved cities...")

    return enrich_all(
        cities,
        reference_tables,
        flags_dir=config.flags_dir,
        default_flag=config.default_flag,
        now=now
    )
