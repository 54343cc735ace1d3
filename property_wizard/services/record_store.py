"""Record store contract and its Supabase implementation."""

import os
from typing import Optional, Protocol
from supabase import create_client, Client
from supabase.client import ClientOptions
from ulid import ULID

from property_wizard.utils.errors import RecordStoreError
from property_wizard.utils.logging import get_structured_logger, log_timing, mask_sensitive_data

logger = get_structured_logger(__name__)

PROPERTIES = "properties"
UNITS = "units"
LISTINGS = "listings"
COLLECTIONS = (PROPERTIES, UNITS, LISTINGS)

RECORD_ID_COLUMN = os.environ.get("RECORD_ID_COLUMN", "id")


class RecordStore(Protocol):
    """Persistence collaborator: flat documents in named collections, keyed by generated IDs."""

    async def create_record(self, collection: str, payload: dict) -> str:
        ...

    async def update_record(self, collection: str, record_id: str, payload: dict) -> None:
        ...

    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        ...

    async def query_records(self, collection: str, filters: dict) -> list[dict]:
        ...


def generate_record_id() -> str:
    """Generate a text-based record ID (ULID format)."""
    return str(ULID())


# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise RecordStoreError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", url=url)

    return _client


def close_supabase_client() -> None:
    """Drop the cached client; the next call builds a fresh one."""
    global _client
    if _client:
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                error=mask_sensitive_data(str(exc_val)),
                type=exc_type.__name__
            )
        return False


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise RecordStoreError(f"Unknown collection: {collection}")


class SupabaseRecordStore:
    """RecordStore backed by one Supabase table per collection."""

    def __init__(self, id_column: str = RECORD_ID_COLUMN):
        self.id_column = id_column

    async def create_record(self, collection: str, payload: dict) -> str:
        """Insert a row and return its ID (generated here unless the payload carries one)."""
        _check_collection(collection)
        record_id = payload.get(self.id_column) or generate_record_id()
        row = {**payload, self.id_column: record_id}

        async with SupabaseClient() as client:
            with log_timing("create_record", logger=logger, collection=collection):
                try:
                    result = client.table(collection).insert(row).execute()
                except Exception as e:
                    raise RecordStoreError(f"Failed to create {collection} record: {e}") from e

        if not result.data:
            raise RecordStoreError(f"Failed to create {collection} record: no data returned")
        return str(result.data[0].get(self.id_column) or record_id)

    async def update_record(self, collection: str, record_id: str, payload: dict) -> None:
        _check_collection(collection)
        changes = {k: v for k, v in payload.items() if k != self.id_column}

        async with SupabaseClient() as client:
            with log_timing("update_record", logger=logger, collection=collection, record_id=record_id):
                try:
                    result = client.table(collection).update(changes).eq(self.id_column, record_id).execute()
                except Exception as e:
                    raise RecordStoreError(f"Failed to update {collection} record {record_id}: {e}") from e

        if not result.data:
            raise RecordStoreError(f"Failed to update {collection} record: {record_id}")

    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        """Fetch one row by ID; None when it does not exist."""
        _check_collection(collection)

        async with SupabaseClient() as client:
            try:
                result = client.table(collection).select("*").eq(self.id_column, record_id).execute()
            except Exception as e:
                raise RecordStoreError(f"Failed to get {collection} record {record_id}: {e}") from e

        return result.data[0] if result.data else None

    async def query_records(self, collection: str, filters: dict) -> list[dict]:
        """All rows whose columns equal every value in `filters`."""
        _check_collection(collection)

        async with SupabaseClient() as client:
            try:
                query = client.table(collection).select("*")
                for column, value in filters.items():
                    query = query.eq(column, value)
                result = query.execute()
            except Exception as e:
                raise RecordStoreError(f"Failed to query {collection}: {e}") from e

        return result.data if result.data else []
