"""City data models"""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CityRecord(BaseModel):
    """City information as stored in the search index"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique city identifier")
    name: str = Field(..., description="Display name")
    asciiname: str = Field("", description="ASCII name used for matching")
    country_id: str = Field("", description="ISO country code")
    timezone: str = Field("", description="Timezone in Olson format")
    population: int = Field(0, ge=0)
    latitude: str = Field(..., description="Latitude in decimal degrees, as text")
    longitude: str = Field(..., description="Longitude in decimal degrees, as text")

    @field_validator('id', 'latitude', 'longitude', mode='before')
    @classmethod
    def coerce_to_text(cls, v):
        """Datasets sometimes carry numbers where text is expected"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('latitude')
    @classmethod
    def validate_latitude(cls, v):
        if not -90.0 <= float(v) <= 90.0:
            raise ValueError(f"latitude out of range: {v}")
        return v

    @field_validator('longitude')
    @classmethod
    def validate_longitude(cls, v):
        if not -180.0 <= float(v) <= 180.0:
            raise ValueError(f"longitude out of range: {v}")
        return v

    @property
    def lat(self) -> float:
        return float(self.latitude)

    @property
    def lon(self) -> float:
        return float(self.longitude)


class CityMatch(BaseModel):
    """A city returned by an index query together with its relevance score"""
    city: CityRecord
    score: float
