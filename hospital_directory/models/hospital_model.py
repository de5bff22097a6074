from typing import Any, List, Optional
from pydantic import BaseModel

from hospital_directory.models.entity_model import CityResponse, EntityRef


class BranchResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    address: Optional[str] = None
    city: List[CityResponse] = []
    doctors: List[EntityRef] = []
    specialists: List[EntityRef] = []
    treatments: List[EntityRef] = []
    departments: List[EntityRef] = []
    accreditation: List[EntityRef] = []
    specialization: List[EntityRef] = []  # carries is_treatment / is_department flags
    description: str = ""
    total_beds: Optional[str] = None
    no_of_doctors: Optional[str] = None
    year_established: Optional[str] = None
    branch_image: Optional[Any] = None
    logo: Optional[Any] = None
    popular: bool = False
    show_hospital: bool = True
    is_standalone: bool = False
    hospital_ids: List[str] = []
    hospital_id: Optional[str] = None
    hospital_name: Optional[str] = None


class HospitalResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: str = ""
    year_established: Optional[str] = None
    hospital_image: Optional[Any] = None
    logo: Optional[Any] = None
    specialty: List[EntityRef] = []
    show_hospital: bool = True
    is_standalone: bool = False
    original_branch_id: Optional[str] = None
    branches: List[BranchResponse] = []
    doctors: List[EntityRef] = []
    specialists: List[EntityRef] = []
    treatments: List[EntityRef] = []
    departments: List[EntityRef] = []
    accreditations: List[EntityRef] = []


class PaginatedHospitalResponse(BaseModel):
    items: List[HospitalResponse]
    total: int
    page: int
    page_size: int
    has_more: bool = False


class PaginatedBranchResponse(BaseModel):
    items: List[BranchResponse]
    total: int
    page: int
    page_size: int
