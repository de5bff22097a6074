"""Raw content-store record → canonical entity dict, one mapper per type.

Mappers are pure and synchronous. They never fetch: every reference comes out
as a stub list from ``normalize_refs`` and is swapped for the full entity by
the enrichment step.
"""
import re
from typing import Any, Callable, Dict, List, Optional

from hospital_directory.services.field_aliases import REFERENCE_NAME_KEYS, UNKNOWN_NAMES, aliases
from hospital_directory.services.field_extractor import get_flag, get_raw, get_record_id, get_value
from hospital_directory.services.geo import UNKNOWN_STATE, infer_state_from_city, normalize_city
from hospital_directory.services.references import (
    extract_hospital_ids,
    is_placeholder,
    normalize_refs,
)
from hospital_directory.services.rich_text import to_html, to_plain_text

TREATMENT_SUFFIX = " (Treatment)"
DEPARTMENT_SUFFIX = " (Department)"
STANDALONE_PREFIX = "standalone-"


def generate_slug(name: Optional[str]) -> str:
    if not name or not isinstance(name, str):
        return ""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def _field(record: Any, entity_type: str, field: str) -> Optional[str]:
    return get_value(record, *aliases(entity_type, field))


def _raw(record: Any, entity_type: str, field: str) -> Any:
    return get_raw(record, *aliases(entity_type, field))


def _name(record: Any, entity_type: str) -> str:
    return _field(record, entity_type, "name") or UNKNOWN_NAMES[entity_type]


def _refs(record: Any, entity_type: str, field: str, ref_type: str) -> List[Dict[str, Any]]:
    return normalize_refs(_raw(record, entity_type, field), *REFERENCE_NAME_KEYS[ref_type])


def _tag(refs: List[Dict[str, Any]], suffix: str, flag: str) -> List[Dict[str, Any]]:
    return [{**ref, "name": ref["name"] + suffix, flag: True} for ref in refs]


def _empty_rollups() -> Dict[str, list]:
    return {
        "branches": [],
        "doctors": [],
        "specialists": [],
        "treatments": [],
        "departments": [],
        "accreditations": [],
    }


def map_hospital(record: Dict[str, Any]) -> Dict[str, Any]:
    name = _name(record, "hospital")
    return {
        "id": get_record_id(record),
        "name": name,
        "slug": generate_slug(name),
        "description": to_plain_text(_raw(record, "hospital", "description")),
        "year_established": _field(record, "hospital", "year_established"),
        "hospital_image": _raw(record, "hospital", "hospital_image"),
        "logo": _raw(record, "hospital", "logo"),
        "specialty": _refs(record, "hospital", "specialty", "specialist"),
        "show_hospital": get_flag(record, *aliases("hospital", "show_hospital"), default=True),
        "is_standalone": False,
        **_empty_rollups(),
    }


def map_standalone_hospital(branch_record: Dict[str, Any]) -> Dict[str, Any]:
    """Promote a branch with no parent hospital to a hospital of its own."""
    branch_id = get_record_id(branch_record)
    name = get_value(branch_record, *aliases("branch", "name"), *aliases("hospital", "name")) or UNKNOWN_NAMES["hospital"]
    return {
        "id": f"{STANDALONE_PREFIX}{branch_id}",
        "name": name,
        "slug": generate_slug(name),
        "description": to_plain_text(_raw(branch_record, "branch", "description")),
        "year_established": _field(branch_record, "branch", "year_established"),
        "hospital_image": get_raw(branch_record, *aliases("branch", "branch_image"), *aliases("hospital", "hospital_image")),
        "logo": _raw(branch_record, "branch", "logo"),
        "specialty": _refs(branch_record, "branch", "specialty", "specialist"),
        "show_hospital": get_flag(branch_record, *aliases("branch", "show_hospital"), default=True),
        "is_standalone": True,
        "original_branch_id": branch_id,
        **_empty_rollups(),
    }


def map_branch(record: Dict[str, Any]) -> Dict[str, Any]:
    name = _name(record, "branch")
    specialties = _refs(record, "branch", "specialty", "specialization")
    treatments = _refs(record, "branch", "treatments", "treatment")
    departments = _refs(record, "branch", "departments", "department")
    return {
        "id": get_record_id(record),
        "name": name,
        "slug": generate_slug(name),
        "address": _field(record, "branch", "address"),
        "city": _refs(record, "branch", "city", "city"),
        "accreditation": _refs(record, "branch", "accreditation", "accreditation"),
        "description": to_plain_text(_raw(record, "branch", "description")),
        "total_beds": _field(record, "branch", "total_beds"),
        "no_of_doctors": _field(record, "branch", "no_of_doctors"),
        "year_established": _field(record, "branch", "year_established"),
        "branch_image": _raw(record, "branch", "branch_image"),
        "logo": _raw(record, "branch", "logo"),
        "doctors": _refs(record, "branch", "doctors", "doctor"),
        "specialists": _refs(record, "branch", "specialists", "specialist"),
        "treatments": treatments,
        "departments": departments,
        "specialization": (
            specialties
            + _tag(treatments, TREATMENT_SUFFIX, "is_treatment")
            + _tag(departments, DEPARTMENT_SUFFIX, "is_department")
        ),
        "popular": get_flag(record, *aliases("branch", "popular")),
        "show_hospital": get_flag(record, *aliases("branch", "show_hospital"), default=True),
        "is_standalone": False,
        "hospital_ids": extract_hospital_ids(record),
    }


def map_doctor(record: Dict[str, Any]) -> Dict[str, Any]:
    about = _raw(record, "doctor", "about")
    name = _name(record, "doctor")
    return {
        "id": get_record_id(record),
        "name": name,
        "slug": generate_slug(name),
        "specialization": _refs(record, "doctor", "specialization", "specialist"),
        "qualification": _field(record, "doctor", "qualification"),
        "experience_years": _field(record, "doctor", "experience_years"),
        "designation": _field(record, "doctor", "designation"),
        "about": to_plain_text(about),
        "about_html": to_html(about),
        "profile_image": _raw(record, "doctor", "profile_image"),
        "popular": get_flag(record, *aliases("doctor", "popular")),
    }


def map_specialist(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": get_record_id(record),
        "name": _name(record, "specialist"),
        "department": _refs(record, "specialist", "department", "department"),
        "treatments": _refs(record, "specialist", "treatments", "treatment"),
    }


def map_department(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": get_record_id(record),
        "name": _name(record, "department"),
        "specialists": _refs(record, "department", "specialists", "specialist"),
    }


def map_treatment(record: Dict[str, Any]) -> Dict[str, Any]:
    description = _raw(record, "treatment", "description")
    name = _name(record, "treatment")
    return {
        "id": get_record_id(record),
        "name": name,
        "slug": generate_slug(name),
        "description": to_plain_text(description),
        "description_html": to_html(description),
        "starting_cost": _field(record, "treatment", "starting_cost"),
        "cost": _field(record, "treatment", "cost"),
        "category": _field(record, "treatment", "category"),
        "duration": _field(record, "treatment", "duration"),
        "treatment_image": _raw(record, "treatment", "treatment_image"),
        "popular": get_flag(record, *aliases("treatment", "popular")),
    }


def map_accreditation(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": get_record_id(record),
        "name": _name(record, "accreditation"),
        "image": _raw(record, "accreditation", "image"),
    }


def map_state(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": get_record_id(record),
        "name": _name(record, "state"),
        "country": _refs(record, "state", "country", "country"),
    }


def map_country(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": get_record_id(record),
        "name": _name(record, "country"),
    }


def _state_refs(record: Any) -> List[Dict[str, Any]]:
    return normalize_refs(_raw(record, "city", "state"), *REFERENCE_NAME_KEYS["state"])


def state_ids_for_city(record: Dict[str, Any]) -> List[str]:
    """State ids a raw city record points at; used to pre-resolve states."""
    return [ref["id"] for ref in _state_refs(record)]


def map_city(
    record: Dict[str, Any],
    state_map: Optional[Dict[str, Dict[str, Any]]] = None,
    country_map: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Map a city, naming its state and country from the resolved lookups.

    Falls back to the state embedded on the record, then to inference from the
    city name, before metro-area normalization is applied.
    """
    state_map = state_map or {}
    country_map = country_map or {}
    name = _name(record, "city")

    state_id = None
    state_name = None
    country_id = None
    country_name = None

    refs = _state_refs(record)
    if refs:
        state_ref = refs[0]
        state_id = state_ref["id"]
        if not is_placeholder(state_ref):
            state_name = state_ref["name"]

    full_state = state_map.get(state_id) if state_id else None
    if full_state:
        if full_state.get("name") and full_state["name"] != UNKNOWN_NAMES["state"]:
            state_name = full_state["name"]
        countries = full_state.get("country") or []
        if countries:
            country_ref = countries[0]
            country_id = country_ref.get("id")
            resolved = country_map.get(country_id) if country_id else None
            if resolved:
                country_name = resolved["name"]
            elif not is_placeholder(country_ref):
                country_name = country_ref["name"]

    if not state_name or state_name == UNKNOWN_STATE:
        state_name = infer_state_from_city(name)

    city = normalize_city({
        "id": get_record_id(record),
        "name": name,
        "state": state_name,
        "country": country_name,
    })
    city["state_id"] = state_id
    city["country_id"] = country_id
    return city


MAPPERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "hospital": map_hospital,
    "branch": map_branch,
    "doctor": map_doctor,
    "specialist": map_specialist,
    "department": map_department,
    "treatment": map_treatment,
    "accreditation": map_accreditation,
    "city": map_city,
    "state": map_state,
    "country": map_country,
}
