"""Read-only access to the CMS collections mirrored into Supabase.

Every collection is a table of ``{"id", "created_at", "data"}`` rows where
``data`` is the JSON body of the CMS item. The client is synchronous; async
callers dispatch through ``asyncio.to_thread``.
"""
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from supabase import Client, create_client

from hospital_directory.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class ContentStore(Protocol):
    def find_by_ids(self, collection: str, ids: Sequence[str], limit: int) -> List[Record]:
        ...

    def search_ids(self, collection: str, field: str, text: str, limit: int) -> List[str]:
        ...

    def query_page(
        self,
        collection: str,
        ids: Optional[Sequence[str]] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Record], int]:
        ...


class SupabaseContentStore:
    def __init__(self, settings: Settings):
        self.url: str = settings.supabase_url
        self.key: str = settings.supabase_key
        self.client: Client = create_client(self.url, self.key)

    def find_by_ids(self, collection: str, ids: Sequence[str], limit: int) -> List[Record]:
        if not ids:
            return []
        logger.debug(f"📦 {collection}: fetching {len(ids)} ids")
        response = (
            self.client.table(collection)
            .select("*")
            .in_("id", list(ids))
            .limit(limit)
            .execute()
        )
        return response.data or []

    def search_ids(self, collection: str, field: str, text: str, limit: int) -> List[str]:
        """Ids of records whose ``data.<field>`` contains ``text`` (case-insensitive)."""
        logger.debug(f"🔎 {collection}: {field} ilike '{text}'")
        response = (
            self.client.table(collection)
            .select("id")
            .ilike(f"data->>{field}", f"%{text}%")
            .limit(limit)
            .execute()
        )
        return [row["id"] for row in response.data or [] if row.get("id")]

    def query_page(
        self,
        collection: str,
        ids: Optional[Sequence[str]] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Record], int]:
        """One page of ``collection``, newest first, with the exact total."""
        query = self.client.table(collection).select("*", count="exact")
        if ids is not None:
            query = query.in_("id", list(ids))
        response = (
            query.order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        records = response.data or []
        total = response.count if response.count is not None else len(records)
        return records, total


@lru_cache()
def get_content_store() -> SupabaseContentStore:
    settings = get_settings()
    logger.info(f"🔌 Connecting to content store at {settings.supabase_url or '<unset>'}")
    return SupabaseContentStore(settings)
