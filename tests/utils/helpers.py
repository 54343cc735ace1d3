"""Test helper functions."""

import asyncio
from typing import Callable, Dict, Any, Optional

from property_wizard.services.draft_store import DraftStore
from property_wizard.services.record_store import COLLECTIONS
from property_wizard.utils.errors import RecordStoreError

from tests.utils.factories import (
    create_listing_draft,
    create_property_draft,
    create_unit_draft,
)

ID_PREFIXES = {"properties": "prop", "units": "unit", "listings": "lst"}


class InMemoryRecordStore:
    """
    RecordStore double keeping rows in dicts.

    Every call is appended to `calls` as (operation, collection, record_id,
    payload). `fail_on(operation, collection, payload)` returning True makes
    that call raise RecordStoreError.
    """

    def __init__(self, fail_on: Optional[Callable[[str, str, Dict[str, Any]], bool]] = None):
        self.rows: Dict[str, Dict[str, Dict[str, Any]]] = {c: {} for c in COLLECTIONS}
        self.calls: list = []
        self.fail_on = fail_on
        self._next_id = 0

    def _maybe_fail(self, operation: str, collection: str, payload: Dict[str, Any]) -> None:
        if self.fail_on and self.fail_on(operation, collection, payload):
            raise RecordStoreError(f"Simulated {operation} failure on {collection}")

    async def create_record(self, collection: str, payload: Dict[str, Any]) -> str:
        # Yield so concurrent writes interleave like real network calls.
        await asyncio.sleep(0)
        self.calls.append(("create", collection, None, payload))
        self._maybe_fail("create", collection, payload)
        self._next_id += 1
        record_id = f"{ID_PREFIXES[collection]}_{self._next_id}"
        self.rows[collection][record_id] = {**payload, "id": record_id}
        return record_id

    async def update_record(self, collection: str, record_id: str, payload: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        self.calls.append(("update", collection, record_id, payload))
        self._maybe_fail("update", collection, payload)
        if record_id not in self.rows[collection]:
            raise RecordStoreError(f"Failed to update {collection} record: {record_id}")
        self.rows[collection][record_id].update(payload)

    async def get_record(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get", collection, record_id, None))
        self._maybe_fail("get", collection, {})
        row = self.rows[collection].get(record_id)
        return dict(row) if row is not None else None

    async def query_records(self, collection: str, filters: Dict[str, Any]) -> list:
        self.calls.append(("query", collection, None, filters))
        self._maybe_fail("query", collection, filters)
        return [
            dict(row) for row in self.rows[collection].values()
            if all(row.get(key) == value for key, value in filters.items())
        ]

    def seed(self, collection: str, record_id: str, row: Dict[str, Any]) -> None:
        """Insert a stored row directly, bypassing call tracking."""
        self.rows[collection][record_id] = {**row, "id": record_id}

    def calls_for(self, operation: str, collection: str) -> list:
        return [call for call in self.calls if call[0] == operation and call[1] == collection]


def build_filled_store(units: int = 1, listings: int = 1, **store_kwargs) -> DraftStore:
    """DraftStore with a valid property and `units` / `listings` valid children, filled through the handlers."""
    store = DraftStore(**store_kwargs)
    prop = create_property_draft()
    store.on_property_change(prop)

    for _ in range(units):
        index = store.add_unit()
        store.on_unit_change(index, create_unit_draft(
            amenities=list(prop.amenities),
            contact_details=prop.contact_details,
        ))

    for _ in range(listings):
        index = store.add_listing()
        store.on_listing_change(index, create_listing_draft(
            amenities=list(prop.amenities),
            contact_details=prop.contact_details,
        ))

    return store
