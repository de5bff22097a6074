import logging
from typing import Any, Dict

from hospital_directory.core.config import Settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.get_hospitals_data import load_hospital_graph
from hospital_directory.services.search import SearchParams, search
from hospital_directory.utils.cache import TTLCache

logger = logging.getLogger(__name__)


async def get_search_data(
    store: ContentStore,
    cache: TTLCache,
    settings: Settings,
    params: SearchParams,
) -> Dict[str, Any]:
    """Run the faceted search over the full enriched hospital graph."""
    logger.info("🔍 get_search_data called")
    logger.info(f"📊 Parameters - view: {params.view}, query: {params.query}, page: {params.page}, page_size: {params.page_size}")

    hospitals = await load_hospital_graph(store, cache, settings, include_standalone=True)
    result = search(hospitals, params)
    result.pop("has_more")
    return result
