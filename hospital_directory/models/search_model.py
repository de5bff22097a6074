from typing import Any, Dict, List
from pydantic import BaseModel

from hospital_directory.models.entity_model import FilterOption


# Items are branches, doctors or treatments depending on the view, each with
# the owning branch_* / hospital_* context attached.
class SearchResponse(BaseModel):
    items: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int
    options: Dict[str, List[FilterOption]] = {}
