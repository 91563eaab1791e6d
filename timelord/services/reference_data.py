"""Loaders for country, phone, currency and airport lookup tables"""
from typing import Dict, List
import logging

from pydantic import ValidationError

from timelord.errors import DatasetError
from timelord.models.airport import AirportRecord
from timelord.models.config import Config
from timelord.models.reference import ReferenceTables
from timelord.services.data_reader import read_json_file

logger = logging.getLogger(__name__)


def load_country_names(countries_file: str) -> Dict[str, str]:
    """
    Load country code -> country name mapping

    Args:
        countries_file: Path to countries.json, an array of {"Code": ..., "Name": ...}

    Returns:
        Mapping of country code to display name
    """
    data = read_json_file(countries_file)
    if not isinstance(data, list):
        raise DatasetError(countries_file, "expected a JSON array of countries")

    countries = {}
    for country in data:
        try:
            countries[country['Code']] = country['Name']
        except (KeyError, TypeError):
            logger.warning(f"Skipping invalid country entry: {country!r}")
    logger.debug(f"Loaded {len(countries)} countries")
    return countries


def _load_string_mapping(mapping_file: str, label: str) -> Dict[str, str]:
    """Load a flat JSON object of country code -> string value"""
    data = read_json_file(mapping_file)
    if not isinstance(data, dict):
        raise DatasetError(mapping_file, f"expected a JSON object of {label}")

    mapping = {str(code): str(value) for code, value in data.items() if value is not None}
    logger.debug(f"Loaded {len(mapping)} {label}")
    return mapping


def load_phone_prefixes(phone_file: str) -> Dict[str, str]:
    """Load country code -> phone prefix mapping"""
    return _load_string_mapping(phone_file, "phone prefixes")


def load_currency_codes(currency_file: str) -> Dict[str, str]:
    """Load country code -> currency code mapping"""
    return _load_string_mapping(currency_file, "currency codes")


def load_airports_by_country(airports_file: str) -> Dict[str, List[AirportRecord]]:
    """
    Load airports grouped by country code

    Airports keep their file order within each country; the proximity
    ranker relies on it for ties.

    Args:
        airports_file: Path to airports.json, an array of airport objects

    Returns:
        Mapping of country code to list of airports
    """
    data = read_json_file(airports_file)
    if not isinstance(data, list):
        raise DatasetError(airports_file, "expected a JSON array of airports")

    airports: Dict[str, List[AirportRecord]] = {}
    count = 0
    for row in data:
        try:
            airport = AirportRecord.model_validate(row)
        except ValidationError as e:
            row_id = row.get('id', 'unknown') if isinstance(row, dict) else 'unknown'
            logger.warning(f"Skipping invalid airport row: {row_id}, error: {e.error_count()} error(s)")
            continue
        airports.setdefault(airport.country_code, []).append(airport)
        count += 1

    logger.debug(f"Loaded {count} airports across {len(airports)} countries")
    return airports


def load_reference_tables(config: Config) -> ReferenceTables:
    """
    Load all static lookup tables used to enrich resolved cities

    Args:
        config: Application configuration

    Returns:
        Immutable ReferenceTables value object
    """
    tables = ReferenceTables(
        country_names=load_country_names(config.countries_file),
        phone_prefixes=load_phone_prefixes(config.phone_file),
        currency_codes=load_currency_codes(config.currency_file),
        airports_by_country=load_airports_by_country(config.airports_file),
    )
    logger.debug("Reference tables loaded")
    return tables
