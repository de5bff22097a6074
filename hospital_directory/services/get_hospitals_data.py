import asyncio
import logging
from typing import Any, Dict, List, Optional

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.enrichment import FilterIds, enrich_hospitals
from hospital_directory.services.field_aliases import aliases
from hospital_directory.services.field_extractor import get_value
from hospital_directory.services.mappers import generate_slug
from hospital_directory.services.references import extract_hospital_ids
from hospital_directory.services.resolver import BatchedResolver
from hospital_directory.services.store_queries import (
    call_store,
    fetch_all_branches,
    has_empty_text_match,
    merge_filter_ids,
    resolve_text_filters,
)
from hospital_directory.utils.cache import TTLCache
from hospital_directory.utils.pagination import empty_page, paginate

logger = logging.getLogger(__name__)


async def load_hospital_graph(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    filter_ids: Optional[FilterIds] = None,
    include_standalone: bool = False,
) -> List[Dict[str, Any]]:
    """Fetch hospitals and branches in parallel and return the enriched graph."""
    (hospital_records, _), branch_records = await asyncio.gather(
        call_store(settings, store.query_page, settings.collection_hospitals, None, settings.root_limit, 0),
        fetch_all_branches(store, cache, settings),
    )
    logger.info(f"📦 Loaded {len(hospital_records)} hospital record(s)")
    resolver = BatchedResolver(store, cache, settings)
    return await enrich_hospitals(
        hospital_records,
        branch_records,
        resolver,
        filter_ids=filter_ids,
        include_standalone=include_standalone,
    )


def _contains(value: Optional[str], text: str) -> bool:
    return bool(value) and text in value.casefold()


def matches_query(hospital: Dict[str, Any], q: str) -> bool:
    """Free-text match on the hospital, its branches, their cities and specialties."""
    text = q.strip().casefold()
    if not text:
        return True
    if _contains(hospital.get("name"), text):
        return True
    if any(_contains(s.get("name"), text) for s in hospital.get("specialty") or []):
        return True
    for branch in hospital.get("branches") or []:
        if _contains(branch.get("name"), text):
            return True
        if any(_contains(c.get("name"), text) for c in branch.get("city") or []):
            return True
        if any(_contains(s.get("name"), text) for s in branch.get("specialization") or []):
            return True
    return False


async def get_hospitals_data(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    page: int = 0,
    page_size: int = 20,
    q: Optional[str] = "",
    slug: Optional[str] = "",
    include_standalone: bool = False,
    text_filters: Optional[Dict[str, Optional[str]]] = None,
    id_filters: Optional[Dict[str, Optional[str]]] = None,
) -> Dict[str, Any]:
    """
    Paginated, enriched hospitals with their branches.
    Text filters are resolved to ids first; one that matches nothing
    short-circuits to an empty page without loading any hospital.
    """
    logger.info("🔍 get_hospitals_data called")
    logger.info(f"📊 Parameters - page: {page}, page_size: {page_size}, q: {q}, slug: {slug}, include_standalone: {include_standalone}")

    text_ids = await resolve_text_filters(store, settings, text_filters or {})
    if has_empty_text_match(text_ids):
        logger.info("🚫 A text filter matched nothing, returning empty page")
        return empty_page(page, page_size)

    filter_ids = merge_filter_ids(id_filters or {}, text_ids)
    hospitals = await load_hospital_graph(store, cache, settings, filter_ids, include_standalone)

    if q and q.strip():
        hospitals = [h for h in hospitals if matches_query(h, q)]
    if slug and slug.strip():
        hospitals = [h for h in hospitals if h["slug"] == slug.strip()]

    result = paginate(hospitals, page, page_size)
    logger.info(f"✅ Returning {len(result['items'])} of {result['total']} hospital(s)")
    return result


def _name_slug(record: Dict[str, Any], entity_type: str) -> str:
    return generate_slug(get_value(record, *aliases(entity_type, "name")))


async def get_hospital_by_slug(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    slug: str,
) -> Optional[Dict[str, Any]]:
    """One enriched hospital, or a standalone branch promoted to one, by slug."""
    slug = slug.strip().lower()
    logger.info(f"🔍 get_hospital_by_slug called - slug: {slug}")

    (hospital_records, _), branch_records = await asyncio.gather(
        call_store(settings, store.query_page, settings.collection_hospitals, None, settings.root_limit, 0),
        fetch_all_branches(store, cache, settings),
    )
    resolver = BatchedResolver(store, cache, settings)

    matching = [r for r in hospital_records if _name_slug(r, "hospital") == slug]
    if matching:
        hospitals = await enrich_hospitals(matching[:1], branch_records, resolver)
    else:
        standalone = [
            r for r in branch_records
            if not extract_hospital_ids(r) and _name_slug(r, "branch") == slug
        ]
        hospitals = await enrich_hospitals([], standalone[:1], resolver, include_standalone=True)

    if not hospitals:
        logger.info(f"🚫 No hospital found for slug: {slug}")
        return None
    return hospitals[0]
