from typing import List, Optional
from pydantic import BaseModel

from hospital_directory.models.entity_model import CityResponse, EntityRef
from hospital_directory.models.hospital_model import BranchResponse


class CityDirectoryResponse(CityResponse):
    # left unset by the plain listing, which does not load branches
    branches: Optional[List[BranchResponse]] = None
    hospitals: Optional[List[EntityRef]] = None
    branches_count: Optional[int] = None


class PaginatedCityResponse(BaseModel):
    items: List[CityDirectoryResponse]
    total: int
    page: int
    page_size: int
