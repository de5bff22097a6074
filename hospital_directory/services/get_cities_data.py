import logging
from typing import Any, Dict, List, Optional

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.field_extractor import get_record_id
from hospital_directory.services.get_branches_data import attach_hospitals, visible_branches
from hospital_directory.services.resolver import BatchedResolver
from hospital_directory.services.store_queries import call_store, fetch_all_branches
from hospital_directory.utils.cache import TTLCache
from hospital_directory.utils.pagination import paginate

logger = logging.getLogger(__name__)

ALL_CITIES_KEY = "cities:all"


async def _map_records(records: List[Dict[str, Any]], resolver: BatchedResolver) -> List[Dict[str, Any]]:
    """Mapped cities in the order of ``records``."""
    by_id = {get_record_id(record): record for record in records if get_record_id(record)}
    mapped = await resolver.map_cities(by_id)
    return [mapped[record_id] for record_id in by_id]


async def fetch_all_cities(store: ContentStore, cache: TTLCache, settings: Settings) -> List[Dict[str, Any]]:
    """Every city record, newest first."""
    async def load() -> List[Dict[str, Any]]:
        records, total = await call_store(
            settings, store.query_page, settings.collection_cities, None, settings.root_limit, 0
        )
        if total > len(records):
            logger.warning(f"⚠️ City collection has {total} records, only the newest {len(records)} are loaded")
        logger.info(f"📦 Loaded {len(records)} city record(s)")
        return records

    return await cache.get_or_load(ALL_CITIES_KEY, load)


async def attach_city_branches(
    cities: List[Dict[str, Any]],
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    resolver: BatchedResolver,
) -> List[Dict[str, Any]]:
    """Give each city its visible branches, their hospitals and a branch count."""
    if not cities:
        return []
    wanted = {city["id"] for city in cities}
    branches = visible_branches(await fetch_all_branches(store, cache, settings))
    branches = [b for b in branches if wanted.intersection(ref.get("id") for ref in b["city"])]
    branches = await attach_hospitals(branches, resolver)

    result = []
    for city in cities:
        in_city = [b for b in branches if city["id"] in {ref.get("id") for ref in b["city"]}]
        hospitals: Dict[str, Dict[str, Any]] = {}
        for branch in in_city:
            if branch["hospital_id"] and branch["hospital_id"] not in hospitals:
                hospitals[branch["hospital_id"]] = {"id": branch["hospital_id"], "name": branch["hospital_name"]}
        result.append({
            **city,
            "branches": in_city,
            "hospitals": list(hospitals.values()),
            "branches_count": len(in_city),
        })
    return result


async def get_cities_data(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    with_branches: bool = False,
    page: int = 0,
    page_size: int = 50,
) -> Dict[str, Any]:
    """
    Paginated, normalized cities.
    The plain listing pages in the store, newest first. With branches every
    city is loaded and sorted by name, then only the requested page gets its
    branches and hospitals attached.
    """
    logger.info("🔍 get_cities_data called")
    logger.info(f"📊 Parameters - with_branches: {with_branches}, page: {page}, page_size: {page_size}")
    resolver = BatchedResolver(store, cache, settings)

    if not with_branches:
        records, total = await call_store(
            settings, store.query_page, settings.collection_cities, None, page_size, page * page_size
        )
        items = await _map_records(records, resolver)
        logger.info(f"✅ Returning {len(items)} of {total} city(ies)")
        return {"items": items, "total": total, "page": page, "page_size": page_size}

    cities = await _map_records(await fetch_all_cities(store, cache, settings), resolver)
    cities.sort(key=lambda c: (c["name"].casefold(), c["id"]))
    result = paginate(cities, page, page_size)
    result["items"] = await attach_city_branches(result["items"], store, cache, settings, resolver)
    result.pop("has_more")
    logger.info(f"✅ Returning {len(result['items'])} of {result['total']} city(ies) with branches")
    return result


async def get_city_by_id(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    city_id: str,
) -> Optional[Dict[str, Any]]:
    """One normalized city with its branches and hospitals, or None."""
    city_id = city_id.strip()
    logger.info(f"🔍 get_city_by_id called - city_id: {city_id}")
    resolver = BatchedResolver(store, cache, settings)

    records, _ = await call_store(settings, store.query_page, settings.collection_cities, [city_id], 1, 0)
    cities = await _map_records(records, resolver)
    if not cities:
        logger.info(f"🚫 No city found for id: {city_id}")
        return None

    city = (await attach_city_branches(cities, store, cache, settings, resolver))[0]
    logger.info(f"🏙️ City {city['name']} has {city['branches_count']} branch(es) and {len(city['hospitals'])} hospital(s)")
    return city
