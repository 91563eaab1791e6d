"""Static reference tables shared by all queries"""
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field

from timelord.models.airport import AirportRecord


class ReferenceTables(BaseModel):
    """Country, phone, currency and airport lookups keyed by country code"""
    model_config = ConfigDict(frozen=True)

    country_names: Dict[str, str] = Field(default_factory=dict)
    phone_prefixes: Dict[str, str] = Field(default_factory=dict)
    currency_codes: Dict[str, str] = Field(default_factory=dict)
    airports_by_country: Dict[str, List[AirportRecord]] = Field(default_factory=dict)

    def country_name(self, country_id: str) -> str:
        return self.country_names.get(country_id, "")

    def phone_prefix(self, country_id: str) -> str:
        return self.phone_prefixes.get(country_id, "")

    def currency_code(self, country_id: str) -> str:
        return self.currency_codes.get(country_id, "")

    def airports_for(self, country_id: str) -> List[AirportRecord]:
        return list(self.airports_by_country.get(country_id, []))
