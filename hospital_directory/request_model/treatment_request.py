from typing import Optional
from pydantic import BaseModel, Field

from hospital_directory.core.config import settings


class TreatmentFilterRequest(BaseModel):
    q: Optional[str] = Field(default="", description="Substring of the treatment name or category")
    category: Optional[str] = Field(default="", description="Exact category, case-insensitive")
    popular: Optional[bool] = Field(default=None, description="Only popular (true) or non-popular (false)")
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page")
