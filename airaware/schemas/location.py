"""Location schemas."""

from pydantic import BaseModel, Field


class Location(BaseModel):
    """A resolved place with canonical coordinates."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    city_name: str = Field(..., description="Best human-readable place name")
    country_code: str = Field(default="", max_length=2, description="ISO 3166-1 alpha-2, or empty")
    display_name: str = Field(default="", description="Full provider display name")

    model_config = {"frozen": True}
