from pydantic import BaseModel, Field

from hospital_directory.core.config import settings

CITY_PAGE_SIZE = 50


class CityFilterRequest(BaseModel):
    with_branches: bool = Field(default=False, description="Attach branches, hospitals and branch counts")
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=CITY_PAGE_SIZE, ge=1, le=settings.max_page_size, description="Items per page")
