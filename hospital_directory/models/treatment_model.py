from typing import Any, List, Optional
from pydantic import BaseModel


class TreatmentResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: str = ""
    description_html: str = ""
    starting_cost: Optional[str] = None
    cost: Optional[str] = None
    category: Optional[str] = None
    duration: Optional[str] = None
    treatment_image: Optional[Any] = None
    popular: bool = False


class PaginatedTreatmentResponse(BaseModel):
    items: List[TreatmentResponse]
    total: int
    page: int
    page_size: int
