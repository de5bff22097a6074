import logging
from typing import Any, Dict, List, Optional

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.enrichment import branch_matches_filters, enrich_branches, has_filters
from hospital_directory.services.mappers import map_branch
from hospital_directory.services.resolver import BatchedResolver
from hospital_directory.services.store_queries import (
    call_store,
    fetch_all_branches,
    has_empty_text_match,
    merge_filter_ids,
    resolve_text_filters,
)
from hospital_directory.utils.cache import TTLCache
from hospital_directory.utils.pagination import paginate

logger = logging.getLogger(__name__)


def visible_branches(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    branches = [map_branch(record) for record in records]
    return [b for b in branches if b["id"] and b["show_hospital"]]


async def attach_hospitals(branches: List[Dict[str, Any]], resolver: BatchedResolver) -> List[Dict[str, Any]]:
    hospitals = await resolver.resolve("hospital", [i for b in branches for i in b["hospital_ids"]])
    attached = []
    for branch in branches:
        hospital = next((hospitals[i] for i in branch["hospital_ids"] if i in hospitals), None)
        attached.append({
            **branch,
            "hospital_id": hospital["id"] if hospital else None,
            "hospital_name": hospital["name"] if hospital else None,
            "is_standalone": not branch["hospital_ids"],
        })
    return attached


async def get_branches_data(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    page: int = 0,
    page_size: int = 30,
    text_filters: Optional[Dict[str, Optional[str]]] = None,
    id_filters: Optional[Dict[str, Optional[str]]] = None,
) -> Dict[str, Any]:
    """
    Paginated, enriched branches.
    Without filters only the requested page is fetched from the store; with
    filters every branch is enriched and filtered in memory.
    """
    logger.info("🔍 get_branches_data called")
    logger.info(f"📊 Parameters - page: {page}, page_size: {page_size}, text: {text_filters}, ids: {id_filters}")

    text_ids = await resolve_text_filters(store, settings, text_filters or {})
    if has_empty_text_match(text_ids):
        logger.info("🚫 A text filter matched nothing, returning empty page")
        return {"items": [], "total": 0, "page": page, "page_size": page_size}

    filter_ids = merge_filter_ids(id_filters or {}, text_ids)
    resolver = BatchedResolver(store, cache, settings)

    if not has_filters(filter_ids):
        records, total = await call_store(
            settings, store.query_page, settings.collection_branches, None, page_size, page * page_size
        )
        branches = await enrich_branches(visible_branches(records), resolver)
        items = await attach_hospitals(branches, resolver)
        logger.info(f"✅ Returning {len(items)} of {total} branch(es)")
        return {"items": items, "total": total, "page": page, "page_size": page_size}

    records = await fetch_all_branches(store, cache, settings)
    branches = await enrich_branches(visible_branches(records), resolver)
    branches = [b for b in branches if branch_matches_filters(b, filter_ids)]
    result = paginate(branches, page, page_size)
    result["items"] = await attach_hospitals(result["items"], resolver)
    result.pop("has_more")
    logger.info(f"✅ Returning {len(result['items'])} of {result['total']} filtered branch(es)")
    return result
