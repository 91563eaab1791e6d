"""
Concurrent resolution of a batch of query terms.

Every term gets its own task on a thread pool. Outcomes are collected as the
tasks finish, so the returned order is completion order and may differ from
input order unless ``preserve_order`` is set. A failing task is recorded as a
failed outcome and never prevents the other outcomes from being collected.
"""
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from timelord.models.city import CityRecord
from timelord.models.outcome import OutcomeStatus, QueryOutcome
from timelord.processing.resolver import resolve
from timelord.services.city_index import CityIndex

logger = logging.getLogger(__name__)


def split_terms(query: str) -> List[str]:
    """
    Split a comma-separated query into individual terms

    Example: 'toronto, paris' -> ['toronto', 'paris']
    """
    return [term.strip() for term in query.split(',')]


def resolve_outcome(term: str, position: int, index: CityIndex) -> QueryOutcome:
    """Resolve one term and wrap the result as a hit or a miss"""
    city = resolve(term, index)
    if city is None:
        return QueryOutcome.miss(term, position)
    return QueryOutcome.hit(term, position, city)


def _collect(future: Future, position: int, term: str) -> QueryOutcome:
    try:
        return future.result()
    except Exception as e:
        logger.warning(f"Query '{term}' failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return QueryOutcome.failed(term, position, str(e) or type(e).__name__)


def dispatch(
    terms: Sequence[str],
    index: CityIndex,
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None,
    preserve_order: bool = False
) -> List[QueryOutcome]:
    """
    Resolve all terms concurrently and return one outcome per term

    Args:
        terms: Query terms, one task each
        index: Shared read-only city index
        max_workers: Thread pool size (default: one thread per term)
        timeout: Seconds to wait for the whole batch; unfinished tasks become failed outcomes
        preserve_order: Sort outcomes back into input order

    Returns:
        Exactly len(terms) outcomes
    """
    terms = list(terms)
    if not terms:
        return []

    workers = min(max_workers or len(terms), len(terms))
    logger.debug(f"Dispatching {len(terms)} queries on {workers} worker(s)")

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix='timelord-query')
    futures: Dict[Future, Tuple[int, str]] = {
        executor.submit(resolve_outcome, term, position, index): (position, term)
        for position, term in enumerate(terms)
    }

    outcomes: List[QueryOutcome] = []
    collected = set()
    timed_out = False
    try:
        for future in as_completed(futures, timeout=timeout):
            position, term = futures[future]
            outcomes.append(_collect(future, position, term))
            collected.add(future)
    except FuturesTimeoutError:
        timed_out = True
        for future, (position, term) in futures.items():
            if future in collected:
                continue
            if future.done():
                outcomes.append(_collect(future, position, term))
            else:
                future.cancel()
                logger.warning(f"Query '{term}' did not finish within {timeout}s")
                outcomes.append(QueryOutcome.failed(term, position, f"timed out after {timeout}s"))
    finally:
        # Threads cannot be interrupted; after a timeout, stragglers are left to finish on their own
        executor.shutdown(wait=not timed_out, cancel_futures=True)

    if preserve_order:
        outcomes.sort(key=lambda outcome: outcome.index)

    summary = {status: 0 for status in OutcomeStatus}
    for outcome in outcomes:
        summary[outcome.status] += 1
    logger.info(
        f"Resolved {len(terms)} queries: {summary[OutcomeStatus.HIT]} hit, "
        f"{summary[OutcomeStatus.MISS]} miss, {summary[OutcomeStatus.FAILED]} failed"
    )
    return outcomes


def resolve_all(
    terms: Sequence[str],
    index: CityIndex,
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None,
    preserve_order: bool = False
) -> List[CityRecord]:
    """
    Resolve all terms concurrently, keeping only the terms that matched a city

    Misses and failures are dropped, so the result may be shorter than `terms`.
    The same city may appear more than once.
    """
    outcomes = dispatch(
        terms,
        index,
        max_workers=max_workers,
        timeout=timeout,
        preserve_order=preserve_order
    )
    return [outcome.city for outcome in outcomes if outcome.is_hit]
