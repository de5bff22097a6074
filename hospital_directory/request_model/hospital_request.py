from typing import Dict, Optional
from pydantic import BaseModel, Field

from hospital_directory.core.config import settings


class HospitalFilterRequest(BaseModel):
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    page_size: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page")
    q: Optional[str] = Field(default="", description="Free text over hospital, branch, city and specialty names")
    slug: Optional[str] = Field(default="", description="Exact hospital slug")
    include_standalone: bool = Field(default=False, description="Promote branches without a hospital")

    branch_text: Optional[str] = None
    city_text: Optional[str] = None
    doctor_text: Optional[str] = None
    specialty_text: Optional[str] = None
    accreditation_text: Optional[str] = None
    treatment_text: Optional[str] = None
    specialist_text: Optional[str] = None
    department_text: Optional[str] = None

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
            "branch": self.branch_text,
            "city": self.city_text,
            "doctor": self.doctor_text,
            "specialty": self.specialty_text,
            "accreditation": self.accreditation_text,
            "treatment": self.treatment_text,
            "specialist": self.specialist_text,
            "department": self.department_text,
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
