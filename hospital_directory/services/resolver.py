import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from hospital_directory.core.config import Settings, get_settings
from hospital_directory.db.supabase_client import ContentStore
from hospital_directory.services.field_extractor import get_record_id
from hospital_directory.services.mappers import MAPPERS, map_city, state_ids_for_city
from hospital_directory.utils.cache import TTLCache

logger = logging.getLogger(__name__)

# Specialist → Treatment/Department and friends are followed once, never further.
MAX_NESTED_DEPTH = 1

# entity type → [(field on the mapped entity, entity type it references)]
NESTED_REFERENCES = {
    "specialist": [("treatments", "treatment"), ("department", "department")],
    "department": [("specialists", "specialist")],
    "doctor": [("specialization", "specialist")],
    "state": [("country", "country")],
}

Entity = Dict[str, Any]


def _unique_ids(ids: Iterable[Any]) -> List[str]:
    return sorted({i.strip() for i in ids if isinstance(i, str) and i.strip()})


class BatchedResolver:
    """Resolve id sets to mapped entities with one content-store fetch per type.

    Fetch failures and timeouts never escape: they are logged and the type
    resolves to an empty map so callers keep their reference stubs.
    """

    def __init__(self, store: ContentStore, cache: TTLCache, settings: Optional[Settings] = None):
        self.store = store
        self.cache = cache
        self.settings = settings or get_settings()

    async def _fetch_records(self, entity_type: str, ids: List[str]) -> Dict[str, Entity]:
        collection = self.settings.collection_for(entity_type)
        cache_key = f"{collection}:{','.join(ids)}"

        async def load() -> List[Entity]:
            logger.debug(f"📦 Fetching {len(ids)} {entity_type} record(s) from {collection}")
            return await asyncio.wait_for(
                asyncio.to_thread(self.store.find_by_ids, collection, ids, self.settings.batch_limit),
                timeout=self.settings.fetch_timeout_seconds,
            )

        records = await self.cache.get_or_load(cache_key, load)

        by_id = {}
        for record in records:
            record_id = get_record_id(record)
            if record_id:
                by_id[record_id] = record
        return by_id

    async def resolve(self, entity_type: str, ids: Iterable[Any], depth: int = 0) -> Dict[str, Entity]:
        unique = _unique_ids(ids)
        if not unique:
            return {}

        try:
            records = await self._fetch_records(entity_type, unique)
            if entity_type == "city":
                resolved = await self.map_cities(records, depth)
            else:
                mapper = MAPPERS[entity_type]
                resolved = {record_id: mapper(record) for record_id, record in records.items()}
                if depth < MAX_NESTED_DEPTH and entity_type in NESTED_REFERENCES:
                    await self._substitute_nested(entity_type, resolved, depth)
        except asyncio.TimeoutError:
            logger.warning(
                f"⏱️ Timed out resolving {len(unique)} {entity_type} id(s) "
                f"after {self.settings.fetch_timeout_seconds}s"
            )
            return {}
        except Exception as e:
            logger.error(f"❌ Failed to resolve {entity_type} references: {e}", exc_info=True)
            return {}

        logger.info(f"🔗 Resolved {len(resolved)}/{len(unique)} {entity_type} reference(s)")
        return resolved

    async def _substitute_nested(self, entity_type: str, resolved: Dict[str, Entity], depth: int) -> None:
        nested = NESTED_REFERENCES[entity_type]
        lookups = await asyncio.gather(*[
            self.resolve(
                ref_type,
                [ref["id"] for entity in resolved.values() for ref in entity.get(field) or []],
                depth + 1,
            )
            for field, ref_type in nested
        ])
        for (field, _), lookup in zip(nested, lookups):
            for entity in resolved.values():
                entity[field] = [lookup.get(ref["id"], ref) for ref in entity.get(field) or []]

    async def map_cities(self, records: Dict[str, Entity], depth: int = 0) -> Dict[str, Entity]:
        """Map raw city records by id, looking up their states and countries first."""
        state_ids = [state_id for record in records.values() for state_id in state_ids_for_city(record)]
        state_map = await self.resolve("state", state_ids, depth + 1)
        country_ids = [ref["id"] for state in state_map.values() for ref in state.get("country") or []]
        country_map = await self.resolve("country", country_ids, depth + 1)
        return {
            record_id: map_city(record, state_map, country_map)
            for record_id, record in records.items()
        }
