"""
Full-text city index.

Cities are indexed on their ASCII and display names. A query matches every
city sharing at least one analysed token with it; matches are scored with
BM25+ and ordered by descending score, then descending population.

The index is built once from the city dataset, pickled to disk and reused on
later runs. It is never modified after construction, so a single instance can
be queried from many threads at once.
"""
import os
import pickle
import re
import unicodedata
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from rank_bm25 import BM25Plus
from rapidfuzz import fuzz, process

from timelord.errors import IndexLoadError
from timelord.models.city import CityMatch, CityRecord
from timelord.models.config import Config
from timelord.services.data_reader import DataReader

logger = logging.getLogger(__name__)

INDEX_FORMAT_VERSION = 2
DEFAULT_FUZZY_THRESHOLD = 85

_TOKEN_PATTERN = re.compile(r'[^\W_]+')


def analyze(text: str) -> List[str]:
    """
    Split text into lower-cased, accent-folded tokens

    Example: 'Saint-Étienne' -> ['saint', 'etienne']
    """
    if not text:
        return []
    normalized = unicodedata.normalize('NFKD', text)
    folded = ''.join(c for c in normalized if not unicodedata.combining(c))
    return _TOKEN_PATTERN.findall(folded.lower())


def city_tokens(city: CityRecord) -> List[str]:
    """Tokens for the indexed text fields of a city"""
    return analyze(city.asciiname) + analyze(city.name)


class CityIndex:
    """Read-only text index over city records"""

    def __init__(
        self,
        records: Sequence[CityRecord],
        tokenized_corpus: Sequence[List[str]],
        bm25: Optional[BM25Plus] = None,
        fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD
    ):
        if len(records) != len(tokenized_corpus):
            raise ValueError("records and tokenized_corpus must have the same length")

        self._records: Tuple[CityRecord, ...] = tuple(records)
        self._corpus: Tuple[Tuple[str, ...], ...] = tuple(tuple(tokens) for tokens in tokenized_corpus)
        self._postings: Dict[str, Tuple[int, ...]] = self._build_postings(self._corpus)
        self._vocabulary: Tuple[str, ...] = tuple(sorted(self._postings))
        if bm25 is None and self._records:
            bm25 = BM25Plus([list(tokens) for tokens in self._corpus])
        self._bm25 = bm25
        self.fuzzy_threshold = fuzzy_threshold

    @staticmethod
    def _build_postings(corpus: Sequence[Sequence[str]]) -> Dict[str, Tuple[int, ...]]:
        postings: Dict[str, List[int]] = {}
        for position, tokens in enumerate(corpus):
            for token in set(tokens):
                postings.setdefault(token, []).append(position)
        return {token: tuple(sorted(positions)) for token, positions in postings.items()}

    @classmethod
    def build(cls, records: Iterable[CityRecord], fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD) -> 'CityIndex':
        """
        Build an index from city records

        Args:
            records: City records in dataset order
            fuzzy_threshold: Minimum similarity for fuzzy token expansion (0 disables it)

        Returns:
            New CityIndex
        """
        unique_records = []
        seen_ids = set()
        for city in records:
            if city.id in seen_ids:
                logger.warning(f"Skipping duplicate city id {city.id} ({city.name})")
                continue
            seen_ids.add(city.id)
            unique_records.append(city)
        records = unique_records

        corpus = [city_tokens(city) for city in records]
        logger.debug(f"Indexing {len(records)} cities")
        return cls(records, corpus, fuzzy_threshold=fuzzy_threshold)

    def __len__(self) -> int:
        return len(self._records)

    def _expand_tokens(self, tokens: List[str]) -> List[str]:
        """Replace unknown tokens with similar vocabulary tokens"""
        expanded = []
        for token in tokens:
            if token in self._postings:
                expanded.append(token)
                continue
            if self.fuzzy_threshold <= 0:
                continue
            similar = process.extract(
                token,
                self._vocabulary,
                scorer=fuzz.ratio,
                score_cutoff=self.fuzzy_threshold,
                limit=None
            )
            if similar:
                logger.debug(f"Expanded unknown token '{token}' to {[choice for choice, _, _ in similar]}")
            expanded.extend(choice for choice, _, _ in similar)
        return expanded

    def query(self, term: str) -> List[CityMatch]:
        """
        Find cities matching a free-text term

        Args:
            term: Query string

        Returns:
            Matches ordered by descending score, then descending population.
            Empty when nothing matches.
        """
        if self._bm25 is None:
            return []

        tokens = self._expand_tokens(analyze(term))
        if not tokens:
            return []

        candidates = sorted({position for token in tokens for position in self._postings.get(token, ())})
        if not candidates:
            return []

        scores = self._bm25.get_batch_scores(tokens, candidates)
        matches = [
            CityMatch(city=self._records[position], score=float(score))
            for position, score in zip(candidates, scores)
        ]
        matches.sort(key=lambda match: (-match.score, -match.city.population))
        return matches

    def save(self, index_path: str) -> None:
        """
        Persist the index with an atomic write

        Args:
            index_path: Destination file
        """
        path = Path(index_path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            'format_version': INDEX_FORMAT_VERSION,
            'records': self._records,
            'tokenized_corpus': self._corpus,
            'bm25': self._bm25,
        }
        temp_path = path.with_suffix(path.suffix + '.tmp')
        try:
            with open(temp_path, 'wb') as f:
                pickle.dump(payload, f)
            os.replace(temp_path, path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise
        logger.debug(f"City index saved to {index_path}")

    @classmethod
    def load(cls, index_path: str, fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD) -> 'CityIndex':
        """
        Open a persisted index

        Raises:
            IndexLoadError: If the file cannot be read or is not a city index
        """
        try:
            with open(index_path, 'rb') as f:
                payload = pickle.load(f)
        except FileNotFoundError:
            raise IndexLoadError(index_path, "file not found")
        except Exception as e:
            raise IndexLoadError(index_path, f"unreadable index: {e}") from e

        if not isinstance(payload, dict) or payload.get('format_version') != INDEX_FORMAT_VERSION:
            raise IndexLoadError(index_path, "unsupported index format")

        try:
            return cls(
                payload['records'],
                payload['tokenized_corpus'],
                bm25=payload['bm25'],
                fuzzy_threshold=fuzzy_threshold
            )
        except (KeyError, TypeError, ValueError) as e:
            raise IndexLoadError(index_path, f"corrupt index: {e}") from e


def open_or_build(config: Config) -> CityIndex:
    """
    Open the persisted city index, building it first if it does not exist

    An existing index is reused as-is, without comparing it to the dataset.

    Args:
        config: Application configuration

    Returns:
        Ready-to-query CityIndex
    """
    if Path(config.index_path).exists():
        logger.debug(f"Opening existing city index at {config.index_path}")
        index = CityIndex.load(config.index_path, fuzzy_threshold=config.fuzzy_threshold)
    else:
        logger.info(f"City index not found, building from {config.cities_file}")
        reader = DataReader(config.cities_file)
        index = CityIndex.build(reader.read_cities(), fuzzy_threshold=config.fuzzy_threshold)
        index.save(config.index_path)

    logger.debug(f"City index ready with {len(index)} cities")
    return index
