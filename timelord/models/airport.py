"""Airport data model"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AirportRecord(BaseModel):
    """Airport information"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str = ""
    code: str = Field(..., description="IATA-like airport code")
    country_code: str
    latitude: float = Field(..., alias="lat", ge=-90, le=90)
    longitude: float = Field(..., alias="long", ge=-180, le=180)
    airport_type: str = Field("", alias="type", description="Airport category, e.g. large_airport")
    distance: Optional[float] = Field(
        None,
        description="Distance in km to the city being resolved, set per query only"
    )

    def with_distance(self, distance: float) -> 'AirportRecord':
        """Return a copy carrying the distance to the current city"""
        return self.model_copy(update={'distance': distance})
