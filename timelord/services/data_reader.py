"""Data reader service for the JSON reference datasets"""
import json
from pathlib import Path
from typing import Any, Iterator
import logging

from pydantic import ValidationError

from timelord.errors import DatasetError
from timelord.models.city import CityRecord

logger = logging.getLogger(__name__)


def read_json_file(file_path: str) -> Any:
    """
    Read and parse a JSON dataset file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed JSON document

    Raises:
        DatasetError: If the file is missing, unreadable or not valid JSON
    """
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"Dataset file not found: {file_path}")
        raise DatasetError(file_path, "file not found")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Invalid JSON in {file_path}: {e}")
        raise DatasetError(file_path, f"invalid JSON: {e}") from e
    except OSError as e:
        logger.error(f"Error reading dataset file {file_path}: {e}")
        raise DatasetError(file_path, str(e)) from e


class DataReader:
    """Service for reading the city dataset"""

    def __init__(self, cities_file: str):
        """
        Initialize data reader

        Args:
            cities_file: Path to cities.json (a JSON array of city objects)
        """
        self.cities_file = cities_file

    def read_cities(self) -> Iterator[CityRecord]:
        """
        Read city records, skipping rows that fail validation

        Yields:
            CityRecord objects in dataset order
        """
        data = read_json_file(self.cities_file)
        if not isinstance(data, list):
            raise DatasetError(self.cities_file, "expected a JSON array of cities")

        skipped = 0
        for position, row in enumerate(data):
            try:
                yield CityRecord.model_validate(row)
            except ValidationError as e:
                skipped += 1
                row_id = row.get('id', 'unknown') if isinstance(row, dict) else 'unknown'
                logger.warning(f"Skipping invalid city row {position} (id={row_id}): {e.error_count()} error(s)")
                logger.debug(f"Validation details for city row {position}: {e}")

        if skipped:
            logger.info(f"Skipped {skipped} invalid city rows in {self.cities_file}")
