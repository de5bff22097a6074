from pydantic_settings import BaseSettings # type: ignore
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    # Application Settings
    app_name: str = "Hospital Directory API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Supabase Settings (content store)
    supabase_url: str = ""
    supabase_key: str = ""

    # CORS Settings
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Content store collections
    collection_hospitals: str = "HospitalMaster"
    collection_branches: str = "BranchesMaster"
    collection_doctors: str = "DoctorMaster"
    collection_cities: str = "CityMaster"
    collection_states: str = "StateMaster"
    collection_countries: str = "CountryMaster"
    collection_accreditations: str = "Accreditation"
    collection_specialists: str = "SpecialistsMaster"
    collection_treatments: str = "TreatmentMaster"
    collection_departments: str = "DepartmentMaster"

    # Fetch tuning
    cache_ttl_seconds: float = 600.0
    fetch_timeout_seconds: float = 10.0
    batch_limit: int = 500
    search_limit: int = 50
    root_limit: int = 1000

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = False

    def collection_for(self, entity_type: str) -> str:
        """Content store collection holding records of ``entity_type``."""
        collections = {
            "hospital": self.collection_hospitals,
            "branch": self.collection_branches,
            "doctor": self.collection_doctors,
            "city": self.collection_cities,
            "state": self.collection_states,
            "country": self.collection_countries,
            "accreditation": self.collection_accreditations,
            "specialist": self.collection_specialists,
            "treatment": self.collection_treatments,
            "department": self.collection_departments,
        }
        if entity_type not in collections:
            raise ValueError(f"Unknown entity type: {entity_type}")
        return collections[entity_type]

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
