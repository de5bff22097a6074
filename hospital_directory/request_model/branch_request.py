from typing import Dict, Optional
from pydantic import BaseModel, Field

from hospital_directory.core.config import settings

BRANCH_PAGE_SIZE = 30


class BranchFilterRequest(BaseModel):
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=BRANCH_PAGE_SIZE, ge=1, le=settings.max_page_size, description="Items per page")

    # Free-text facets, matched against names in the content store
    branch: Optional[str] = None
    city: Optional[str] = None
    doctor: Optional[str] = None
    specialty: Optional[str] = None
    accreditation: Optional[str] = None
    treatment: Optional[str] = None
    department: Optional[str] = None

    branch_id: Optional[str] = None
    city_id: Optional[str] = None
    doctor_id: Optional[str] = None
    specialty_id: Optional[str] = None
    accreditation_id: Optional[str] = None
    treatment_id: Optional[str] = None
    specialist_id: Optional[str] = None
    department_id: Optional[str] = None

    def text_filters(self) -> Dict[str, Optional[str]]:
        return {
            "branch": self.branch,
            "city": self.city,
            "doctor": self.doctor,
            "specialty": self.specialty,
            "accreditation": self.accreditation,
            "treatment": self.treatment,
            "department": self.department,
        }

    def id_filters(self) -> Dict[str, Optional[str]]:
        return {
            "branch": self.branch_id,
            "city": self.city_id,
            "doctor": self.doctor_id,
            "specialty": self.specialty_id,
            "accreditation": self.accreditation_id,
            "treatment": self.treatment_id,
            "specialist": self.specialist_id,
            "department": self.department_id,
        }
