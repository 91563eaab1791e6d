"""Configuration models"""
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class Config(BaseModel):
    """Application configuration"""
    index_path: str = Field("cities.index", description="Path to the persisted city search index")
    datasets_dir: str = Field("datasets", description="Directory holding the JSON reference datasets")
    flags_dir: str = Field("flags", description="Directory holding country flag icons")
    default_flag: str = Field("_no_flag.png", description="Icon used when a country flag is missing")
    max_workers: Optional[int] = Field(
        default=None,
        description="Upper bound on concurrent query tasks (default: one per query term)"
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for a batch of queries before giving up on stragglers"
    )
    fuzzy_threshold: int = Field(
        default=85,
        description="Minimum similarity (0-100) for fuzzy token expansion, 0 disables it"
    )
    preserve_order: bool = Field(
        default=False,
        description="Return results in input order instead of completion order"
    )

    @field_validator('max_workers')
    @classmethod
    def validate_max_workers(cls, v):
        """Ensure worker count is positive"""
        if v is not None and v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is positive"""
        if v is not None and v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator('fuzzy_threshold')
    @classmethod
    def validate_fuzzy_threshold(cls, v):
        if not 0 <= v <= 100:
            raise ValueError("fuzzy_threshold must be between 0 and 100")
        return v

    def dataset_path(self, filename: str) -> str:
        """Resolve a dataset file name against the datasets directory"""
        return str(Path(self.datasets_dir) / filename)

    @property
    def cities_file(self) -> str:
        return self.dataset_path('cities.json')

    @property
    def countries_file(self) -> str:
        return self.dataset_path('countries.json')

    @property
    def airports_file(self) -> str:
        return self.dataset_path('airports.json')

    @property
    def phone_file(self) -> str:
        return self.dataset_path('phone.json')

    @property
    def currency_file(self) -> str:
        return self.dataset_path('currency.json')
