from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field

from hospital_directory.core.config import settings
from hospital_directory.services.search import FacetFilter, SearchParams


class FacetFilterRequest(BaseModel):
    id: Optional[str] = Field(default=None, description="Selected entity id")
    query: Optional[str] = Field(default=None, description="Case-insensitive name substring")


class SearchRequest(BaseModel):
    view: Literal["hospitals", "doctors", "treatments"] = Field(default="hospitals", description="Candidate type")
    query: Optional[str] = Field(default="", description="Free-text relevance query")
    city: Optional[FacetFilterRequest] = None
    specialization: Optional[FacetFilterRequest] = None
    department: Optional[FacetFilterRequest] = None
    treatment: Optional[FacetFilterRequest] = None
    doctor: Optional[FacetFilterRequest] = None
    branch: Optional[FacetFilterRequest] = None
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page")

    def to_params(self) -> SearchParams:
        facets: Dict[str, FacetFilter] = {}
        for name in ("city", "specialization", "department", "treatment", "doctor", "branch"):
            facet = getattr(self, name)
            if facet is not None:
                facets[name] = FacetFilter(id=facet.id, query=facet.query)
        return SearchParams(
            view=self.view,
            query=self.query or "",
            facets=facets,
            page=self.page,
            page_size=self.page_size,
        )
