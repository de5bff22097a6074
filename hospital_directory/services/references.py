"""Normalize raw CMS reference values into ``{"id", "name", ...}`` stubs."""
from typing import Any, Dict, List, Optional

from hospital_directory.services.field_aliases import HOSPITAL_ASSOCIATION_KEYS
from hospital_directory.services.field_extractor import get_raw, get_record_id, get_value


ID_REFERENCE = "ID Reference"
UNKNOWN = "Unknown"


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _normalize_one(ref: Any, name_keys: tuple) -> Optional[Dict[str, Any]]:
    if isinstance(ref, str):
        ref_id = ref.strip()
        return {"id": ref_id, "name": ID_REFERENCE} if ref_id else None
    if not isinstance(ref, dict):
        return None

    ref_id = get_record_id(ref)
    if not ref_id:
        # A name with no addressable id cannot be resolved or filtered on.
        return None
    name = get_value(ref, *name_keys, "name", "title")
    extra = {k: v for k, v in ref.items() if k not in ("id", "name")}
    return {"id": ref_id, "name": name or ID_REFERENCE, **extra}


def normalize_refs(value: Any, *name_keys: str) -> List[Dict[str, Any]]:
    """Turn an id, an embedded object, or a list of either into stubs.

    Falsy entries are dropped. Duplicates are kept; de-duplication is the
    enrichment step's job.
    """
    refs = []
    for item in _as_list(value):
        if not item:
            continue
        normalized = _normalize_one(item, name_keys)
        if normalized is not None:
            refs.append(normalized)
    return refs


def extract_ids(refs: List[Any]) -> List[str]:
    ids = []
    for ref in refs or []:
        ref_id = get_record_id(ref)
        if ref_id:
            ids.append(ref_id)
    return ids


def is_placeholder(ref: Dict[str, Any]) -> bool:
    return ref.get("name") in (ID_REFERENCE, UNKNOWN)


def extract_hospital_ids(branch_record: Any) -> List[str]:
    """Hospital ids a raw branch points at, in alias precedence order."""
    ids: List[str] = []
    for key in HOSPITAL_ASSOCIATION_KEYS:
        for item in _as_list(get_raw(branch_record, key)):
            hospital_id = get_record_id(item)
            if hospital_id and hospital_id not in ids:
                ids.append(hospital_id)
    return ids
