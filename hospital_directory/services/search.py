"""Faceted filtering and relevance ranking over the enriched hospital graph.

Nothing here fetches. Each view flattens the hospitals into one candidate per
branch, doctor or treatment, carrying the facet references it can be filtered
on and the owning branch/hospital names used for display and scoring.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from hospital_directory.utils.pagination import paginate

logger = logging.getLogger(__name__)

Entity = Dict[str, Any]

VIEWS = ("hospitals", "doctors", "treatments")
FACETS = ("city", "specialization", "department", "treatment", "doctor", "branch")

EXACT, PREFIX, SUBSTRING = 3, 2, 1

# The primary name weight is more than three times the sum of the rest, so an
# exact name match always beats a partial one whatever else matches.
SEARCH_WEIGHTS = {
    "hospitals": {
        "name": 100,
        "hospital": 10,
        "city": 3,
        "specialization": 2,
        "treatment": 2,
        "doctor": 2,
        "department": 1,
    },
    "doctors": {
        "name": 100,
        "branch": 10,
        "hospital": 5,
        "specialization": 3,
        "city": 2,
        "department": 1,
    },
    "treatments": {
        "name": 100,
        "branch": 10,
        "hospital": 5,
        "category": 3,
        "city": 2,
    },
}


@dataclass
class Candidate:
    item: Entity
    facets: Dict[str, List[Entity]]
    score: int = 0

    @property
    def id(self) -> str:
        return self.item["id"]

    @property
    def name(self) -> str:
        return self.item.get("name") or ""

    @property
    def branch_attributed(self) -> bool:
        return bool(self.item.get("branch_id"))


@dataclass
class FacetFilter:
    id: Optional[str] = None
    query: Optional[str] = None

    @property
    def active(self) -> bool:
        return bool((self.id or "").strip() or (self.query or "").strip())


@dataclass
class SearchParams:
    view: str = "hospitals"
    query: str = ""
    facets: Dict[str, FacetFilter] = field(default_factory=dict)
    page: int = 0
    page_size: int = 20


def _named(refs: Iterable[Entity]) -> List[Entity]:
    return [ref for ref in refs or [] if isinstance(ref, dict) and ref.get("id")]


def _specialties(branch: Entity) -> List[Entity]:
    entries = [
        entry for entry in branch.get("specialization") or []
        if not entry.get("is_treatment") and not entry.get("is_department")
    ]
    return _named(entries + list(branch.get("specialists") or []))


def _departments(branch: Entity) -> List[Entity]:
    departments = list(branch.get("departments") or [])
    for specialist in branch.get("specialists") or []:
        departments.extend(specialist.get("department") or [])
    return _named(departments)


def _context(branch: Entity) -> Dict[str, Any]:
    return {
        "branch_id": branch.get("id"),
        "branch_name": branch.get("name"),
        "hospital_id": branch.get("hospital_id"),
        "hospital_name": branch.get("hospital_name"),
    }


def _branch_candidate(branch: Entity) -> Candidate:
    return Candidate(
        item=branch,
        facets={
            "city": _named(branch.get("city")),
            "specialization": _specialties(branch),
            "department": _departments(branch),
            "treatment": _named(branch.get("treatments")),
            "doctor": _named(branch.get("doctors")),
            "branch": [{"id": branch["id"], "name": branch.get("name")}],
        },
    )


def _doctor_candidate(doctor: Entity, branch: Optional[Entity], hospital: Entity) -> Candidate:
    context = _context(branch) if branch else {"hospital_id": hospital.get("id"), "hospital_name": hospital.get("name")}
    specialization = _named(doctor.get("specialization"))
    return Candidate(
        item={**doctor, **context},
        facets={
            "city": _named(branch.get("city")) if branch else [],
            "specialization": specialization,
            "department": _named(d for s in specialization for d in s.get("department") or []),
            "treatment": _named(t for s in specialization for t in s.get("treatments") or []),
            "doctor": [{"id": doctor["id"], "name": doctor.get("name")}],
            "branch": [{"id": branch["id"], "name": branch.get("name")}] if branch else [],
        },
    )


def _treatment_candidate(treatment: Entity, branch: Optional[Entity], hospital: Entity) -> Candidate:
    context = _context(branch) if branch else {"hospital_id": hospital.get("id"), "hospital_name": hospital.get("name")}
    offering = []
    if branch:
        offering = [
            s for s in branch.get("specialists") or []
            if treatment["id"] in {t.get("id") for t in s.get("treatments") or []}
        ]
    return Candidate(
        item={**treatment, **context},
        facets={
            "city": _named(branch.get("city")) if branch else [],
            "specialization": _named(offering),
            "department": _named(d for s in offering for d in s.get("department") or []),
            "treatment": [{"id": treatment["id"], "name": treatment.get("name")}],
            "doctor": _named(branch.get("doctors")) if branch else [],
            "branch": [{"id": branch["id"], "name": branch.get("name")}] if branch else [],
        },
    )


def _dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    """One candidate per id, preferring a branch-attributed copy."""
    unique: Dict[str, Candidate] = {}
    for candidate in candidates:
        existing = unique.get(candidate.id)
        if existing is None or (candidate.branch_attributed and not existing.branch_attributed):
            unique[candidate.id] = candidate
    return list(unique.values())


def build_candidates(hospitals: List[Entity], view: str) -> List[Candidate]:
    if view not in VIEWS:
        raise ValueError(f"Unknown search view: {view}")

    candidates = []
    for hospital in hospitals:
        if view == "doctors":
            candidates.extend(_doctor_candidate(d, None, hospital) for d in _named(hospital.get("doctors")))
        elif view == "treatments":
            candidates.extend(_treatment_candidate(t, None, hospital) for t in _named(hospital.get("treatments")))
        for branch in hospital.get("branches") or []:
            if view == "hospitals":
                candidates.append(_branch_candidate(branch))
            elif view == "doctors":
                candidates.extend(_doctor_candidate(d, branch, hospital) for d in _named(branch.get("doctors")))
            else:
                candidates.extend(_treatment_candidate(t, branch, hospital) for t in _named(branch.get("treatments")))
    return _dedupe(candidates)


def matches_facet(candidate: Candidate, facet: str, facet_filter: FacetFilter) -> bool:
    refs = candidate.facets.get(facet) or []
    selected = (facet_filter.id or "").strip()
    if selected:
        return any(ref.get("id") == selected for ref in refs)
    text = (facet_filter.query or "").strip().casefold()
    if text:
        return any(text in (ref.get("name") or "").casefold() for ref in refs)
    return True


def apply_facets(candidates: List[Candidate], facets: Dict[str, FacetFilter]) -> List[Candidate]:
    active = {name: f for name, f in (facets or {}).items() if f is not None and f.active}
    for name in active:
        if name not in FACETS:
            raise ValueError(f"Unknown search facet: {name}")
    return [c for c in candidates if all(matches_facet(c, name, f) for name, f in active.items())]


def match_strength(value: Optional[str], query: str) -> int:
    """3 for an exact match, 2 for a prefix, 1 for a substring, else 0."""
    if not value or not query:
        return 0
    text = value.strip().casefold()
    if text == query:
        return EXACT
    if text.startswith(query):
        return PREFIX
    if query in text:
        return SUBSTRING
    return 0


def _field_values(candidate: Candidate, search_field: str) -> List[str]:
    item = candidate.item
    if search_field == "name":
        return [candidate.name]
    if search_field == "hospital":
        return [item.get("hospital_name") or ""]
    if search_field == "branch":
        return [item.get("branch_name") or ""]
    if search_field == "category":
        return [item.get("category") or ""]
    return [ref.get("name") or "" for ref in candidate.facets.get(search_field) or []]


def score_candidate(candidate: Candidate, query: str, weights: Dict[str, int]) -> int:
    query = query.strip().casefold()
    score = 0
    for search_field, weight in weights.items():
        best = max((match_strength(v, query) for v in _field_values(candidate, search_field)), default=0)
        score += best * weight
    return score


def _sort_key(candidate: Candidate, searching: bool) -> Tuple:
    base = (candidate.name.casefold(), candidate.id)
    return (-candidate.score,) + base if searching else base


def rank(candidates: List[Candidate], query: str, view: str) -> List[Candidate]:
    """Score and order candidates; without a query the order is alphabetical."""
    query = (query or "").strip()
    if not query:
        return sorted(candidates, key=lambda c: _sort_key(c, False))

    weights = SEARCH_WEIGHTS[view]
    for candidate in candidates:
        candidate.score = score_candidate(candidate, query, weights)
    scored = [c for c in candidates if c.score > 0]
    return sorted(scored, key=lambda c: _sort_key(c, True))


def collect_filter_options(candidates: List[Candidate]) -> Dict[str, List[Dict[str, str]]]:
    """Distinct ``{id, name}`` options per facet across the matching ``candidates``."""
    options = {}
    for facet in FACETS:
        seen: Dict[str, str] = {}
        for candidate in candidates:
            for ref in candidate.facets.get(facet) or []:
                if ref.get("id") and ref["id"] not in seen:
                    seen[ref["id"]] = ref.get("name") or ""
        options[facet] = sorted(
            ({"id": ref_id, "name": name} for ref_id, name in seen.items()),
            key=lambda o: (o["name"].casefold(), o["id"]),
        )
    return options


def search(hospitals: List[Entity], params: SearchParams) -> Dict[str, Any]:
    candidates = build_candidates(hospitals, params.view)
    filtered = apply_facets(candidates, params.facets)
    ranked = rank(filtered, params.query, params.view)
    logger.info(
        f"🔎 {params.view} search '{params.query}': "
        f"{len(candidates)} candidate(s), {len(filtered)} after facets, {len(ranked)} ranked"
    )

    result = paginate([c.item for c in ranked], params.page, params.page_size)
    result["options"] = collect_filter_options(ranked)
    return result
