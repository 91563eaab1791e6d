"""Output utilities for rendering the result payload"""
import json
from pathlib import Path
from typing import List

from timelord.models.result import EnrichedResult

import logging

logger = logging.getLogger(__name__)


def build_payload(results: List[EnrichedResult]) -> dict:
    """Wrap result items in the top-level payload object"""
    return {"items": [result.model_dump() for result in results]}


def render_payload(results: List[EnrichedResult]) -> str:
    """
    Render results as the JSON payload printed on stdout

    Args:
        results: Enriched result items

    Returns:
        Compact JSON string of the form {"items": [...]}
    """
    return json.dumps(build_payload(results), ensure_ascii=False)


def write_payload_json(results: List[EnrichedResult], output_path: str) -> None:
    """
    Write the JSON payload to a file

    Args:
        results: Enriched result items
        output_path: Output file path
    """
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(build_payload(results), f, indent=2, ensure_ascii=False)

    logger.debug(f"Payload written to {output_path} with {len(results)} items")
