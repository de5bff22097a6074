import logging
from typing import Any, Dict, List, Optional

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.mappers import map_treatment
from hospital_directory.services.store_queries import call_store
from hospital_directory.utils.cache import TTLCache
from hospital_directory.utils.pagination import paginate

logger = logging.getLogger(__name__)

ALL_TREATMENTS_KEY = "treatments:all"
TREATMENTS_TTL_SECONDS = 300


async def fetch_all_treatments(store: ContentStore, cache: TTLCache, settings: Settings) -> List[Dict[str, Any]]:
    """Every treatment, mapped and sorted by name."""
    async def load() -> List[Dict[str, Any]]:
        records, _ = await call_store(
            settings, store.query_page, settings.collection_treatments, None, settings.root_limit, 0
        )
        treatments = [map_treatment(record) for record in records]
        treatments = [t for t in treatments if t["id"]]
        treatments.sort(key=lambda t: (t["name"].casefold(), t["id"]))
        logger.info(f"📦 Cached {len(treatments)} treatment(s)")
        return treatments

    return await cache.get_or_load(ALL_TREATMENTS_KEY, load, ttl=TREATMENTS_TTL_SECONDS)


async def get_treatments_data(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    q: Optional[str] = "",
    category: Optional[str] = "",
    popular: Optional[bool] = None,
    page: int = 0,
    page_size: int = 20,
) -> Dict[str, Any]:
    logger.info("🔍 get_treatments_data called")
    logger.info(f"📊 Parameters - q: {q}, category: {category}, popular: {popular}, page: {page}, page_size: {page_size}")

    treatments = await fetch_all_treatments(store, cache, settings)

    if q and q.strip():
        text = q.strip().casefold()
        treatments = [
            t for t in treatments
            if text in t["name"].casefold() or text in (t.get("category") or "").casefold()
        ]
    if category and category.strip():
        wanted = category.strip().casefold()
        treatments = [t for t in treatments if (t.get("category") or "").casefold() == wanted]
    if popular is not None:
        treatments = [t for t in treatments if t["popular"] == popular]

    result = paginate(treatments, page, page_size)
    result.pop("has_more")
    logger.info(f"✅ Returning {len(result['items'])} of {result['total']} treatment(s)")
    return result
