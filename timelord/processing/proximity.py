"""Great-circle distance and nearest airport ranking"""
import math
from typing import List, Sequence

from timelord.models.airport import AirportRecord

EARTH_RADIUS_KM = 6371
NEAREST_CANDIDATES = 5
MAX_AIRPORTS = 3


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points

    Args:
        lat1, lon1: First point in decimal degrees
        lat2, lon2: Second point in decimal degrees

    Returns:
        Distance in kilometres
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = phi2 - phi1
    delta_lambda = math.radians(lon2) - math.radians(lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return c * EARTH_RADIUS_KM


def nearest_airports(lat: float, lon: float, candidates: Sequence[AirportRecord]) -> List[AirportRecord]:
    """
    Pick up to three airports near a point

    The five closest airports are taken first, then re-ranked by airport type
    so that e.g. 'large_airport' beats 'small_airport' within that set. Both
    sorts are stable: equal keys keep their input order.

    Args:
        lat: Latitude of the city
        lon: Longitude of the city
        candidates: Airports to choose from, usually all airports of the city's country

    Returns:
        Copies of the chosen airports with `distance` set, at most three
    """
    ranked = [
        airport.with_distance(haversine_distance(lat, lon, airport.latitude, airport.longitude))
        for airport in candidates
    ]

    ranked.sort(key=lambda airport: airport.distance)
    closest = ranked[:NEAREST_CANDIDATES]
    closest.sort(key=lambda airport: airport.airport_type)

    return closest[:MAX_AIRPORTS]
