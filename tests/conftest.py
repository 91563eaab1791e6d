"""Shared fixtures: a small world of cities, countries and airports"""
import json
from datetime import datetime

import pytest
import pytz

from timelord.models.city import CityRecord
from timelord.models.config import Config
from timelord.services.city_index import CityIndex
from timelord.services.reference_data import load_reference_tables


CITIES = [
    {"id": "6167865", "name": "Toronto", "asciiname": "Toronto", "country_id": "CA",
     "timezone": "America/Toronto", "population": 2800000, "latitude": "43.7", "longitude": "-79.4"},
    {"id": "5174095", "name": "Toronto", "asciiname": "Toronto", "country_id": "US",
     "timezone": "America/New_York", "population": 5091, "latitude": "40.46423", "longitude": "-80.60091"},
    {"id": "2988507", "name": "Paris", "asciiname": "Paris", "country_id": "FR",
     "timezone": "Europe/Paris", "population": 2138551, "latitude": "48.85341", "longitude": "2.3488"},
    {"id": "4717560", "name": "Paris", "asciiname": "Paris", "country_id": "US",
     "timezone": "America/Chicago", "population": 25171, "latitude": "33.66094", "longitude": "-95.55551"},
    {"id": "2643743", "name": "London", "asciiname": "London", "country_id": "GB",
     "timezone": "Europe/London", "population": 8961989, "latitude": "51.50853", "longitude": "-0.12574"},
    {"id": "3448439", "name": "São Paulo", "asciiname": "Sao Paulo", "country_id": "BR",
     "timezone": "America/Sao_Paulo", "population": 10021295, "latitude": "-23.5475", "longitude": "-46.63611"},
    {"id": "2980291", "name": "Saint-Étienne", "asciiname": "Saint-Etienne", "country_id": "FR",
     "timezone": "Europe/Paris", "population": 176280, "latitude": "45.43389", "longitude": "4.39"},
]

COUNTRIES = [
    {"Code": "CA", "Name": "Canada"},
    {"Code": "US", "Name": "United States"},
    {"Code": "FR", "Name": "France"},
    {"Code": "GB", "Name": "United Kingdom"},
    {"Code": "BR", "Name": "Brazil"},
]

PHONE = {"CA": "1", "US": "1", "FR": "33", "GB": "44", "BR": "55"}

CURRENCY = {"CA": "CAD", "US": "USD", "FR": "EUR", "GB": "GBP", "BR": "BRL"}

AIRPORTS = [
    {"id": 1, "name": "Toronto Pearson", "code": "YYZ", "country_code": "CA",
     "lat": 43.6777, "long": -79.6248, "type": "large_airport"},
    {"id": 2, "name": "Billy Bishop", "code": "YTZ", "country_code": "CA",
     "lat": 43.6275, "long": -79.3962, "type": "medium_airport"},
    {"id": 3, "name": "Region of Waterloo", "code": "YKF", "country_code": "CA",
     "lat": 43.4605, "long": -80.3786, "type": "medium_airport"},
    {"id": 4, "name": "Hamilton", "code": "YHM", "country_code": "CA",
     "lat": 43.1736, "long": -79.935, "type": "medium_airport"},
    {"id": 5, "name": "Oshawa Executive", "code": "YOO", "country_code": "CA",
     "lat": 43.9228, "long": -78.895, "type": "small_airport"},
    {"id": 6, "name": "Vancouver", "code": "YVR", "country_code": "CA",
     "lat": 49.1939, "long": -123.1844, "type": "large_airport"},
    {"id": 7, "name": "Charles de Gaulle", "code": "CDG", "country_code": "FR",
     "lat": 49.0097, "long": 2.5479, "type": "large_airport"},
    {"id": 8, "name": "Orly", "code": "ORY", "country_code": "FR",
     "lat": 48.7233, "long": 2.3794, "type": "large_airport"},
    {"id": 9, "name": "Heathrow", "code": "LHR", "country_code": "GB",
     "lat": 51.47, "long": -0.4543, "type": "large_airport"},
]


def _write_json(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)


@pytest.fixture
def datasets_dir(tmp_path):
    """Write the sample datasets into a temporary directory"""
    directory = tmp_path / "datasets"
    directory.mkdir()
    _write_json(directory / "cities.json", CITIES)
    _write_json(directory / "countries.json", COUNTRIES)
    _write_json(directory / "phone.json", PHONE)
    _write_json(directory / "currency.json", CURRENCY)
    _write_json(directory / "airports.json", AIRPORTS)
    return directory


@pytest.fixture
def flags_dir(tmp_path):
    """Flag icons for Canada only, plus the fallback icon"""
    directory = tmp_path / "flags"
    directory.mkdir()
    (directory / "canada.png").write_bytes(b"png")
    (directory / "_no_flag.png").write_bytes(b"png")
    return directory


@pytest.fixture
def config(tmp_path, datasets_dir, flags_dir):
    return Config(
        index_path=str(tmp_path / "cities.index"),
        datasets_dir=str(datasets_dir),
        flags_dir=str(flags_dir),
    )


@pytest.fixture
def city_records():
    return [CityRecord.model_validate(row) for row in CITIES]


@pytest.fixture
def city_index(city_records):
    return CityIndex.build(city_records)


@pytest.fixture
def reference_tables(config):
    return load_reference_tables(config)


@pytest.fixture
def fixed_now():
    """Monday 19 October 2026, 13:41 UTC (09:41 EDT in Toronto)"""
    return datetime(2026, 10, 19, 13, 41, tzinfo=pytz.utc)
