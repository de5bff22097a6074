"""Root-level content-store queries shared by the directory services."""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.enrichment import FILTER_FACETS, FilterIds
from hospital_directory.services.field_aliases import aliases
from hospital_directory.utils.cache import TTLCache

logger = logging.getLogger(__name__)

ALL_BRANCHES_KEY = "branches:all"

# text facet → (entity type searched, CMS fields matched)
TEXT_FILTER_SOURCES = {
    "branch": ("branch", aliases("branch", "name")),
    "city": ("city", ("cityName", "city name", "City Name")),
    "doctor": ("doctor", aliases("doctor", "name")),
    "specialty": ("specialist", ("specialty", "Specialty Name")),
    "accreditation": ("accreditation", aliases("accreditation", "name")),
    "treatment": ("treatment", ("treatmentName", "Treatment Name")),
    "specialist": ("specialist", ("specialty", "title")),
    "department": ("department", ("department", "name")),
}


async def call_store(settings: Settings, fn: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking store call off the event loop, bounded by the fetch timeout."""
    return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=settings.fetch_timeout_seconds)


async def fetch_all_branches(store: ContentStore, cache: TTLCache, settings: Settings) -> List[Dict[str, Any]]:
    async def load() -> List[Dict[str, Any]]:
        records, total = await call_store(
            settings, store.query_page, settings.collection_branches, None, settings.root_limit, 0
        )
        if total > len(records):
            logger.warning(f"⚠️ Branch collection has {total} records, only the newest {len(records)} are loaded")
        logger.info(f"📦 Loaded {len(records)} branch record(s)")
        return records

    return await cache.get_or_load(ALL_BRANCHES_KEY, load)


async def search_entity_ids(store: ContentStore, settings: Settings, facet: str, text: str) -> List[str]:
    """Ids of ``facet`` records whose name fields contain ``text``."""
    entity_type, fields = TEXT_FILTER_SOURCES[facet]
    collection = settings.collection_for(entity_type)
    per_field = await asyncio.gather(*[
        call_store(settings, store.search_ids, collection, field, text, settings.search_limit)
        for field in fields
    ])
    ids: List[str] = []
    for field_ids in per_field:
        for record_id in field_ids:
            if record_id not in ids:
                ids.append(record_id)
    return ids


async def resolve_text_filters(
    store: ContentStore, settings: Settings, text_filters: Dict[str, Optional[str]]
) -> Dict[str, List[str]]:
    """Run every non-blank text facet search in parallel."""
    active = {facet: text.strip() for facet, text in (text_filters or {}).items() if text and text.strip()}
    if not active:
        return {}
    logger.info(f"🔎 Resolving text filters: {active}")
    results = await asyncio.gather(*[
        search_entity_ids(store, settings, facet, text) for facet, text in active.items()
    ])
    return dict(zip(active.keys(), results))


def merge_filter_ids(id_filters: Dict[str, Optional[str]], text_ids: Dict[str, List[str]]) -> FilterIds:
    merged: FilterIds = {facet: [] for facet in FILTER_FACETS}
    for facet, value in (id_filters or {}).items():
        if value and value.strip():
            merged[facet].append(value.strip())
    for facet, ids in (text_ids or {}).items():
        merged[facet].extend(i for i in ids if i not in merged[facet])
    return merged


def has_empty_text_match(text_ids: Dict[str, List[str]]) -> bool:
    return any(not ids for ids in text_ids.values())
