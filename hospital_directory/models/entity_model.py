from typing import Optional
from pydantic import BaseModel


class EntityRef(BaseModel):
    """A resolved entity or an unresolved ``ID Reference`` stub.

    Extra keys are kept so a substituted entity serializes in full.
    """
    id: str
    name: str = "Unknown"

    class Config:
        extra = "allow"


class CityResponse(EntityRef):
    state: str = "Unknown State"
    country: str = "Unknown Country"
    state_id: Optional[str] = None
    country_id: Optional[str] = None


class FilterOption(BaseModel):
    id: str
    name: str
