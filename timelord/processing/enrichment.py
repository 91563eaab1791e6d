"""Enrichment functions for turning resolved cities into result items"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence
import pytz

from timelord.models.city import CityRecord
from timelord.models.reference import ReferenceTables
from timelord.models.result import EnrichedResult, ResultIcon
from timelord.processing.proximity import nearest_airports

import logging

logger = logging.getLogger(__name__)

DEFAULT_FLAGS_DIR = "flags"
DEFAULT_FLAG = "_no_flag.png"


def get_local_time(timezone_str: str, now: Optional[datetime] = None) -> datetime:
    """
    Get the current time in a timezone

    Args:
        timezone_str: Timezone string (Olson format, e.g., 'America/Toronto')
        now: Reference instant, defaults to the current time. Naive values are taken as UTC.

    Returns:
        Timezone-aware local datetime, in UTC if the timezone is unknown
    """
    if now is None:
        now = datetime.now(pytz.utc)
    elif now.tzinfo is None:
        now = pytz.utc.localize(now)

    try:
        tz = pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{timezone_str}', falling back to UTC")
        tz = pytz.utc

    return now.astimezone(tz)


def format_clock(dt: datetime) -> str:
    """Format a time as '3:04 PM'"""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def format_day(dt: datetime) -> str:
    """Format a date as 'Monday, January 2'"""
    return f"{dt.strftime('%A, %B')} {dt.day}"


def flag_icon_path(country_name: str, flags_dir: str = DEFAULT_FLAGS_DIR, default_flag: str = DEFAULT_FLAG) -> str:
    """
    Get the flag icon for a country

    Example: 'United Kingdom' -> 'flags/united_kingdom.png'

    Returns:
        Path of the country's flag, or of the default flag when it is missing
    """
    icon_name = country_name.replace(' ', '_').lower()
    icon = Path(flags_dir) / f"{icon_name}.png"
    if not icon_name or not icon.exists():
        icon = Path(flags_dir) / default_flag
    return icon.as_posix()


def enrich(
    city: CityRecord,
    tables: ReferenceTables,
    flags_dir: str = DEFAULT_FLAGS_DIR,
    default_flag: str = DEFAULT_FLAG,
    now: Optional[datetime] = None
) -> EnrichedResult:
    """
    Build the result item for a resolved city

    Missing lookup entries become empty fields instead of errors.

    Args:
        city: Resolved city
        tables: Country, phone, currency and airport lookups
        flags_dir: Directory holding flag icons
        default_flag: Icon file used when the country flag is missing
        now: Reference instant for the local time (defaults to now)

    Returns:
        EnrichedResult for the output payload
    """
    local_now = get_local_time(city.timezone, now)
    zone = local_now.tzname() or ""

    country_name = tables.country_name(city.country_id)
    phone = tables.phone_prefix(city.country_id)
    currency = tables.currency_code(city.country_id)
    if not country_name:
        logger.debug(f"No country name for '{city.country_id}' (city {city.id})")

    airports = nearest_airports(city.lat, city.lon, tables.airports_for(city.country_id))
    airport_codes = ",".join(airport.code for airport in airports)

    subtitle = [
        format_day(local_now),
        country_name,
        f"+{phone}" if phone else "",
        currency,
        airport_codes,
    ]

    return EnrichedResult(
        uid=city.id,
        title=f"{city.name} — {format_clock(local_now)} {zone}".rstrip(),
        subtitle=" | ".join(subtitle),
        arg=city.name,
        autocomplete=city.name,
        icon=ResultIcon(path=flag_icon_path(country_name, flags_dir, default_flag)),
    )


def enrich_all(
    cities: Sequence[CityRecord],
    tables: ReferenceTables,
    flags_dir: str = DEFAULT_FLAGS_DIR,
    default_flag: str = DEFAULT_FLAG,
    now: Optional[datetime] = None
) -> List[EnrichedResult]:
    """
    Enrich every city, skipping any city whose enrichment fails

    Returns:
        Result items in the same order as `cities`
    """
    if now is None:
        now = datetime.now(pytz.utc)

    results = []
    for city in cities:
        try:
            results.append(enrich(city, tables, flags_dir, default_flag, now))
        except Exception as e:
            logger.warning(f"Skipping city {city.id} ({city.name}): enrichment failed: {e}", exc_info=True)
    return results
