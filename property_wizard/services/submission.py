"""
Submission coordinator - turns a validated FormState into records.

Create mode writes the property first, then every unit concurrently (each
tagged with the new property ID), then, after all units finished, every
listing concurrently. Listing i is paired with unit i by position; when no
unit exists at that index the listing gets an empty `unit_id`.

A failed write raises SubmissionError. Records written before the failure are
not rolled back; their IDs are reported on the exception.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from property_wizard.models.form_state import FormState, WizardMode
from property_wizard.models.identity import Identity
from property_wizard.models.listing import ListingDraft
from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft
from property_wizard.services.record_store import LISTINGS, PROPERTIES, UNITS, RecordStore
from property_wizard.utils.errors import SubmissionError
from property_wizard.utils.logging import (
    correlation_context,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
    mask_user_id,
)

logger = get_structured_logger(__name__)


class SubmissionResult(BaseModel):
    """IDs of every record written (created or updated), in draft order."""
    mode: WizardMode
    property_id: Optional[str] = None
    unit_ids: list[str] = Field(default_factory=list)
    listing_ids: list[str] = Field(default_factory=list)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def property_payload(draft: PropertyDraft) -> dict:
    return draft.model_dump(mode="json", exclude={"record_id"})


def unit_payload(draft: UnitDraft) -> dict:
    return draft.model_dump(mode="json", exclude={"record_id"})


def listing_payload(draft: ListingDraft) -> dict:
    return draft.model_dump(mode="json", exclude={"record_id", "unit_id"})


class SubmissionCoordinator:
    """Writes the wizard drafts through a RecordStore."""

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    async def submit(self, state: FormState, identity: Identity) -> SubmissionResult:
        with correlation_context() as correlation_id:
            logger.info(
                "Submitting property wizard",
                correlation_id=correlation_id,
                mode=state.mode.value,
                landlord_id=mask_user_id(identity.user_id),
                units_count=len(state.units),
                listings_count=len(state.listings)
            )

            if state.mode == WizardMode.CREATE:
                result = await self._create(state, identity)
            elif state.mode == WizardMode.EDIT_PROPERTY:
                result = await self._update_property(state, identity)
            else:
                result = await self._update_listing(state)

            logger.info(
                "Property wizard submitted",
                correlation_id=correlation_id,
                mode=state.mode.value,
                property_id=result.property_id,
                units_written=len(result.unit_ids),
                listings_written=len(result.listing_ids)
            )
            return result

    # Create mode

    async def _create(self, state: FormState, identity: Identity) -> SubmissionResult:
        created: dict[str, list[str]] = {PROPERTIES: [], UNITS: [], LISTINGS: []}
        now = utc_now_iso()
        stamp = {"landlord_id": identity.user_id, "created_at": now, "updated_at": now}

        with log_timing("create_property", logger=logger):
            property_id = await self._write_one(
                PROPERTIES, None, {**property_payload(state.property), **stamp}, created
            )

        unit_ops = [
            (None, {**unit_payload(unit), "property_id": property_id, **stamp})
            for unit in state.units
        ]
        with log_timing("create_units", logger=logger, property_id=property_id, units_count=len(unit_ops)):
            unit_ids = await self._write_batch(UNITS, unit_ops, created)

        listing_ops = [
            (None, {
                **listing_payload(listing),
                "property_id": property_id,
                "unit_id": unit_ids[i] if i < len(unit_ids) else "",
                **stamp,
                "published_at": now,
            })
            for i, listing in enumerate(state.listings)
        ]
        with log_timing("create_listings", logger=logger, property_id=property_id, listings_count=len(listing_ops)):
            listing_ids = await self._write_batch(LISTINGS, listing_ops, created)

        return SubmissionResult(
            mode=WizardMode.CREATE,
            property_id=property_id,
            unit_ids=unit_ids,
            listing_ids=listing_ids,
        )

    # Edit modes

    async def _update_property(self, state: FormState, identity: Identity) -> SubmissionResult:
        property_id = state.property.record_id
        if not property_id:
            raise SubmissionError("Cannot update a property that was never loaded")

        created: dict[str, list[str]] = {PROPERTIES: [], UNITS: [], LISTINGS: []}
        now = utc_now_iso()
        new_stamp = {"landlord_id": identity.user_id, "created_at": now, "updated_at": now}

        await self._write_one(
            PROPERTIES, property_id, {**property_payload(state.property), "updated_at": now}, created
        )

        unit_ops = []
        for unit in state.units:
            payload = {**unit_payload(unit), "property_id": property_id}
            payload.update({"updated_at": now} if unit.record_id else new_stamp)
            unit_ops.append((unit.record_id, payload))
        unit_ids = await self._write_batch(UNITS, unit_ops, created)

        listing_ops = []
        for i, listing in enumerate(state.listings):
            payload = {**listing_payload(listing), "property_id": property_id}
            if listing.record_id:
                # Loaded listings keep the unit they were paired with at creation.
                if listing.unit_id is not None:
                    payload["unit_id"] = listing.unit_id
                payload["updated_at"] = now
            else:
                payload["unit_id"] = unit_ids[i] if i < len(unit_ids) else ""
                payload.update(new_stamp, published_at=now)
            listing_ops.append((listing.record_id, payload))
        listing_ids = await self._write_batch(LISTINGS, listing_ops, created)

        return SubmissionResult(
            mode=WizardMode.EDIT_PROPERTY,
            property_id=property_id,
            unit_ids=unit_ids,
            listing_ids=listing_ids,
        )

    async def _update_listing(self, state: FormState) -> SubmissionResult:
        listing = self._editing_listing(state)
        payload = {**listing_payload(listing), "updated_at": utc_now_iso()}
        if listing.unit_id is not None:
            payload["unit_id"] = listing.unit_id

        listing_id = await self._write_one(LISTINGS, listing.record_id, payload, {LISTINGS: []})

        return SubmissionResult(
            mode=WizardMode.EDIT_LISTING,
            property_id=state.property.record_id,
            listing_ids=[listing_id],
        )

    @staticmethod
    def _editing_listing(state: FormState) -> ListingDraft:
        for listing in state.listings:
            if listing.record_id and listing.record_id == state.editing_listing_id:
                return listing
        raise SubmissionError(f"Listing being edited is not loaded: {state.editing_listing_id}")

    # Writes

    async def _write_one(
        self,
        collection: str,
        record_id: Optional[str],
        payload: dict,
        created: dict[str, list[str]],
    ) -> str:
        try:
            if record_id:
                await self.record_store.update_record(collection, record_id, payload)
                return record_id
            new_id = await self.record_store.create_record(collection, payload)
        except Exception as e:
            logger.error(
                "Record write failed",
                collection=collection,
                record_id=record_id,
                created_ids=created,
                error=mask_sensitive_data(str(e)),
                exc_info=True
            )
            raise SubmissionError(f"Failed to save {collection} record: {e}", created) from e

        created.setdefault(collection, []).append(new_id)
        return new_id

    async def _write_batch(
        self,
        collection: str,
        ops: list[tuple[Optional[str], dict]],
        created: dict[str, list[str]],
    ) -> list[str]:
        """Run all writes of one collection concurrently; fail after every write has settled."""
        results = await asyncio.gather(
            *(self._write_one(collection, record_id, payload, created) for record_id, payload in ops),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            raise SubmissionError(
                f"Failed to save {len(failures)} of {len(ops)} {collection} records: {failures[0]}",
                created,
            ) from failures[0]

        return list(results)
