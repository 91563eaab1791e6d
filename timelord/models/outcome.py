"""Per-query outcome model"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator

from timelord.models.city import CityRecord


class OutcomeStatus(str, Enum):
    HIT = "hit"
    MISS = "miss"
    FAILED = "failed"


class QueryOutcome(BaseModel):
    """Result of resolving a single query term within a batch"""
    model_config = ConfigDict(frozen=True)

    term: str
    index: int
    status: OutcomeStatus
    city: Optional[CityRecord] = None
    error: Optional[str] = None

    @model_validator(mode='after')
    def check_city_matches_status(self):
        """Only hits carry a city"""
        if self.status is OutcomeStatus.HIT and self.city is None:
            raise ValueError("hit outcome requires a city")
        if self.status is not OutcomeStatus.HIT and self.city is not None:
            raise ValueError(f"{self.status.value} outcome must not carry a city")
        return self

    @property
    def is_hit(self) -> bool:
        return self.status is OutcomeStatus.HIT

    @classmethod
    def hit(cls, term: str, index: int, city: CityRecord) -> 'QueryOutcome':
        return cls(term=term, index=index, status=OutcomeStatus.HIT, city=city)

    @classmethod
    def miss(cls, term: str, index: int) -> 'QueryOutcome':
        return cls(term=term, index=index, status=OutcomeStatus.MISS)

    @classmethod
    def failed(cls, term: str, index: int, error: str) -> 'QueryOutcome':
        return cls(term=term, index=index, status=OutcomeStatus.FAILED, error=error)
