"""Turn mapped root entities into a fully dereferenced hospital graph.

The flow for a batch of branches is collect ids → one resolver call per type
in parallel → substitute stubs. Hospitals additionally get their branches from
a reverse index over the branch → hospital association aliases.
"""
import asyncio
import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from hospital_directory.services.field_extractor import get_record_id
from hospital_directory.services.geo import infer_state_from_city, normalize_city
from hospital_directory.services.mappers import (
    DEPARTMENT_SUFFIX,
    TREATMENT_SUFFIX,
    map_branch,
    map_hospital,
    map_standalone_hospital,
)
from hospital_directory.services.references import is_placeholder
from hospital_directory.services.resolver import BatchedResolver

logger = logging.getLogger(__name__)

Entity = Dict[str, Any]
FilterIds = Dict[str, List[str]]

FILTER_FACETS = (
    "branch",
    "city",
    "doctor",
    "specialty",
    "treatment",
    "specialist",
    "department",
    "accreditation",
)

RESOLVED_TYPES = ("doctor", "city", "accreditation", "specialist", "treatment", "department")


def _ids(refs: Iterable[Entity]) -> List[str]:
    return [ref["id"] for ref in refs or [] if ref.get("id")]


def collect_branch_ids(branches: Iterable[Entity]) -> Dict[str, Set[str]]:
    """Union of referenced ids per entity type across ``branches``.

    Specialization entries are routed by their discriminator flag.
    """
    ids: Dict[str, Set[str]] = {entity_type: set() for entity_type in RESOLVED_TYPES}
    for branch in branches:
        ids["doctor"].update(_ids(branch.get("doctors")))
        ids["city"].update(_ids(branch.get("city")))
        ids["accreditation"].update(_ids(branch.get("accreditation")))
        ids["specialist"].update(_ids(branch.get("specialists")))
        ids["treatment"].update(_ids(branch.get("treatments")))
        ids["department"].update(_ids(branch.get("departments")))
        for entry in branch.get("specialization") or []:
            if not entry.get("id"):
                continue
            if entry.get("is_treatment"):
                ids["treatment"].add(entry["id"])
            elif entry.get("is_department"):
                ids["department"].add(entry["id"])
            else:
                ids["specialist"].add(entry["id"])
    return ids


def _substitute(refs: Iterable[Entity], lookup: Dict[str, Entity]) -> List[Entity]:
    return [copy.deepcopy(lookup[ref["id"]]) if ref.get("id") in lookup else ref for ref in refs or []]


def _substitute_specialization(entries: Iterable[Entity], lookups: Dict[str, Dict[str, Entity]]) -> List[Entity]:
    substituted = []
    for entry in entries or []:
        if entry.get("is_treatment"):
            resolved = lookups["treatment"].get(entry["id"])
            if resolved:
                entry = {**copy.deepcopy(resolved), "name": resolved["name"] + TREATMENT_SUFFIX, "is_treatment": True}
        elif entry.get("is_department"):
            resolved = lookups["department"].get(entry["id"])
            if resolved:
                entry = {**copy.deepcopy(resolved), "name": resolved["name"] + DEPARTMENT_SUFFIX, "is_department": True}
        elif entry.get("id") in lookups["specialist"]:
            entry = copy.deepcopy(lookups["specialist"][entry["id"]])
        substituted.append(entry)
    return substituted


def _fallback_city(ref: Entity) -> Entity:
    name = None if is_placeholder(ref) else ref.get("name")
    return normalize_city({"id": ref["id"], "name": name, "state": infer_state_from_city(name)})


def _substitute_cities(branch: Entity, lookup: Dict[str, Entity]) -> List[Entity]:
    cities = []
    for ref in branch.get("city") or []:
        resolved = lookup.get(ref["id"])
        if resolved:
            cities.append(copy.deepcopy(resolved))
        else:
            cities.append(_fallback_city(ref))
    if not cities:
        cities.append(normalize_city({"id": f"fallback-{branch['id']}"}))
    return cities


async def enrich_branches(branches: List[Entity], resolver: BatchedResolver) -> List[Entity]:
    ids = collect_branch_ids(branches)
    results = await asyncio.gather(*[
        resolver.resolve(entity_type, ids[entity_type]) for entity_type in RESOLVED_TYPES
    ])
    lookups = dict(zip(RESOLVED_TYPES, results))

    enriched = []
    for branch in branches:
        enriched.append({
            **branch,
            "doctors": _substitute(branch.get("doctors"), lookups["doctor"]),
            "city": _substitute_cities(branch, lookups["city"]),
            "accreditation": _substitute(branch.get("accreditation"), lookups["accreditation"]),
            "specialists": _substitute(branch.get("specialists"), lookups["specialist"]),
            "treatments": _substitute(branch.get("treatments"), lookups["treatment"]),
            "departments": _substitute(branch.get("departments"), lookups["department"]),
            "specialization": _substitute_specialization(branch.get("specialization"), lookups),
        })
    return enriched


def group_branches_by_hospital(
    branches: Iterable[Entity], hospital_ids: Iterable[str]
) -> Tuple[Dict[str, List[Entity]], List[Entity]]:
    """Assign each branch to one hospital of ``hospital_ids``.

    The first id in association precedence order that names a known hospital
    wins. Returns the grouping and the branches with no association at all.
    """
    known = set(hospital_ids)
    grouped: Dict[str, List[Entity]] = {hospital_id: [] for hospital_id in known}
    unassociated = []
    for branch in branches:
        candidates = branch.get("hospital_ids") or []
        if not candidates:
            unassociated.append(branch)
            continue
        matches = [hospital_id for hospital_id in candidates if hospital_id in known]
        if not matches:
            continue
        if len(matches) > 1:
            logger.warning(
                f"⚠️ Branch {branch['id']} points at several hospitals {matches}; "
                f"grouping under {matches[0]}"
            )
        grouped[matches[0]].append(branch)
    return grouped, unassociated


def has_filters(filter_ids: Optional[FilterIds]) -> bool:
    return any(filter_ids.get(facet) for facet in FILTER_FACETS) if filter_ids else False


def _department_ids(branch: Entity) -> Set[str]:
    ids = set(_ids(branch.get("departments")))
    for specialist in branch.get("specialists") or []:
        ids.update(_ids(specialist.get("department")))
    for entry in branch.get("specialization") or []:
        if entry.get("is_department") and entry.get("id"):
            ids.add(entry["id"])
    return ids


def _facet_ids(branch: Entity, facet: str) -> Set[str]:
    if facet == "branch":
        return {branch["id"]}
    if facet == "city":
        return set(_ids(branch.get("city")))
    if facet == "doctor":
        return set(_ids(branch.get("doctors")))
    if facet == "specialty":
        return {
            entry["id"] for entry in branch.get("specialization") or []
            if entry.get("id") and not entry.get("is_treatment") and not entry.get("is_department")
        }
    if facet == "treatment":
        return set(_ids(branch.get("treatments")))
    if facet == "specialist":
        return set(_ids(branch.get("specialists")))
    if facet == "department":
        return _department_ids(branch)
    if facet == "accreditation":
        return set(_ids(branch.get("accreditation")))
    raise ValueError(f"Unknown filter facet: {facet}")


def branch_matches_filters(branch: Entity, filter_ids: Optional[FilterIds]) -> bool:
    """True when ``branch`` shares at least one id with every non-empty facet."""
    for facet in FILTER_FACETS:
        wanted = (filter_ids or {}).get(facet)
        if wanted and not _facet_ids(branch, facet) & set(wanted):
            return False
    return True


def _unique_by_id(items: Iterable[Entity]) -> List[Entity]:
    unique: Dict[str, Entity] = {}
    for item in items:
        if item.get("id") and item["id"] not in unique:
            unique[item["id"]] = item
    return list(unique.values())


def rollup_hospital(hospital: Entity, branches: List[Entity]) -> Entity:
    departments = []
    for branch in branches:
        departments.extend(branch.get("departments") or [])
        for specialist in branch.get("specialists") or []:
            departments.extend(specialist.get("department") or [])
    return {
        **hospital,
        "branches": branches,
        "doctors": _unique_by_id(d for b in branches for d in b.get("doctors") or []),
        "specialists": _unique_by_id(s for b in branches for s in b.get("specialists") or []),
        "treatments": _unique_by_id(t for b in branches for t in b.get("treatments") or []),
        "departments": _unique_by_id(departments),
        "accreditations": _unique_by_id(a for b in branches for a in b.get("accreditation") or []),
    }


async def enrich_hospitals(
    hospital_records: List[Entity],
    branch_records: List[Entity],
    resolver: BatchedResolver,
    filter_ids: Optional[FilterIds] = None,
    include_standalone: bool = False,
) -> List[Entity]:
    """Map, group, enrich, filter and roll up hospitals with their branches.

    Hidden hospitals and branches are dropped. When any id filter is active,
    hospitals left without a matching branch are dropped too.
    """
    hospitals = [map_hospital(record) for record in hospital_records]
    hospitals = [h for h in hospitals if h["id"] and h["show_hospital"]]

    branches = [map_branch(record) for record in branch_records]
    branches = [b for b in branches if b["id"] and b["show_hospital"]]

    grouped, unassociated = group_branches_by_hospital(branches, [h["id"] for h in hospitals])

    if include_standalone:
        raw_by_id = {get_record_id(record): record for record in branch_records}
        for branch in unassociated:
            standalone = map_standalone_hospital(raw_by_id[branch["id"]])
            if not standalone["show_hospital"]:
                continue
            hospitals.append(standalone)
            grouped[standalone["id"]] = [branch]

    kept = [branch for hospital in hospitals for branch in grouped.get(hospital["id"], [])]
    logger.info(f"🏥 Enriching {len(kept)} branch(es) across {len(hospitals)} hospital(s)")
    enriched_by_id = {branch["id"]: branch for branch in await enrich_branches(kept, resolver)}

    filtering = has_filters(filter_ids)
    results = []
    for hospital in hospitals:
        hospital_branches = []
        for branch in grouped.get(hospital["id"], []):
            enriched = enriched_by_id[branch["id"]]
            if not branch_matches_filters(enriched, filter_ids):
                continue
            hospital_branches.append({
                **enriched,
                "hospital_id": hospital["id"],
                "hospital_name": hospital["name"],
                "is_standalone": hospital["is_standalone"],
            })
        if filtering and not hospital_branches:
            continue
        results.append(rollup_hospital(hospital, hospital_branches))

    logger.info(f"✅ {len(results)} hospital(s) after filtering")
    return results
