"""Main entry point for timelord city time lookups"""
import logging
import sys
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from timelord.errors import TimelordError
from timelord.models.config import Config
from timelord.processing.pipeline import run_city_lookup_pipeline
from timelord.utils.output import render_payload, write_payload_json

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    """Configure logging level based on debug flag"""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True  # Override any existing configuration
    )


@click.command()
@click.argument('query', nargs=-1)
@click.option('--index-path', default='cities.index', show_default=True,
              help='Path to the city search index (built on first run if missing)')
@click.option('--datasets-dir', default='datasets', show_default=True,
              help='Directory containing cities.json, countries.json, airports.json, phone.json and currency.json')
@click.option('--flags-dir', default='flags', show_default=True,
              help='Directory containing country flag icons')
@click.option('--workers', type=int, default=None,
              help='Maximum number of concurrent query tasks (default: one per query term)')
@click.option('--timeout', type=float, default=None,
              help='Seconds to wait for all query terms before dropping unfinished ones. '
                   'The payload is printed on time, but the process still waits for a stuck query to finish before it exits')
@click.option('--fuzzy-threshold', type=click.IntRange(0, 100), default=85, show_default=True,
              help='Minimum similarity for matching misspelled words, 0 disables fuzzy matching')
@click.option('--ordered', is_flag=True,
              help='Return results in query order instead of completion order')
@click.option('--output', required=False,
              help='Also write the JSON payload to this file')
@click.option('-d', '--debug', is_flag=True,
              help='Enable debug logging for detailed output')
def main(query: Tuple[str, ...], index_path: str, datasets_dir: str, flags_dir: str,
         workers: Optional[int], timeout: Optional[float], fuzzy_threshold: int,
         ordered: bool, output: Optional[str], debug: bool):
    """
    Look up the local time, country details and nearest airports of cities.

    QUERY is one or more comma-separated city names, e.g. "toronto, paris".
    Results are printed to stdout as {"items": [...]}.
    """
    configure_logging(debug=debug)

    search = " ".join(query)
    if not search.strip():
        logger.error("Must specify query")
        sys.exit(1)

    try:
        config = Config(
            index_path=index_path,
            datasets_dir=datasets_dir,
            flags_dir=flags_dir,
            max_workers=workers,
            timeout=timeout,
            fuzzy_threshold=fuzzy_threshold,
            preserve_order=ordered
        )
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        sys.exit(1)

    try:
        results = run_city_lookup_pipeline(config, search)
        payload = render_payload(results)
        if output:
            write_payload_json(results, output)
    except TimelordError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error during processing: {e}", exc_info=True)
        sys.exit(1)

    click.echo(payload)


if __name__ == '__main__':
    main()
