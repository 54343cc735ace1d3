"""Edit-mode loader - rebuilds a FormState from stored records."""

import asyncio
from datetime import date, datetime
from typing import Any, Optional

from property_wizard.models.form_state import FormState, StepStatus, WizardMode, WizardStep, initial_steps
from property_wizard.models.identity import Identity
from property_wizard.models.listing import ListingDraft
from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft
from property_wizard.services.draft_store import DraftStore
from property_wizard.services.record_store import (
    LISTINGS,
    PROPERTIES,
    RECORD_ID_COLUMN,
    UNITS,
    RecordStore,
)
from property_wizard.utils.errors import LoadError, ListingNotFoundError, PropertyNotFoundError
from property_wizard.utils.logging import (
    correlation_context,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
    mask_user_id,
)

logger = get_structured_logger(__name__)

# Records written by the earlier web client used camelCase keys.
LEGACY_KEYS = {
    "userDetails": "contact_details",
    "socialFeeds": "social_feeds",
    "squareFeet": "square_feet",
    "unitNumber": "unit_number",
    "availableDate": "available_date",
    "floorImage": "floor_plan_image",
    "propertyType": "property_type",
    "isRentWiseNetwork": "is_network_member",
    "postalCode": "postal_code",
    "propertyId": "property_id",
    "unitId": "unit_id",
    "landlordId": "landlord_id",
    "createdAt": "created_at",
}

DATE_FIELDS = ("available_date", "lease_start_date", "lease_end_date")


def parse_date(value: Any) -> Optional[date]:
    """Accept a date, a datetime or an ISO string; anything else is treated as absent."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Ignoring unparseable date in record", value=str(value))
        return None


def _normalize(record: dict, id_column: str = RECORD_ID_COLUMN) -> dict:
    """snake_case keys, nested groups normalized, nulls dropped so draft defaults apply."""
    data: dict = {}
    for key, value in record.items():
        if key in LEGACY_KEYS and LEGACY_KEYS[key] in record:
            continue
        data[LEGACY_KEYS.get(key, key)] = value

    for group in ("address", "contact_details", "location", "social_feeds"):
        if isinstance(data.get(group), dict):
            data[group] = _normalize(data[group], id_column="")

    for field in DATE_FIELDS:
        if field in data:
            data[field] = parse_date(data[field])

    data = {key: value for key, value in data.items() if value is not None}

    if id_column and record.get(id_column) is not None:
        data["record_id"] = str(record[id_column])
    return data


def record_to_property_draft(record: dict) -> PropertyDraft:
    return PropertyDraft.model_validate(_normalize(record))


def record_to_unit_draft(record: dict) -> UnitDraft:
    return UnitDraft.model_validate(_normalize(record))


def record_to_listing_draft(record: dict) -> ListingDraft:
    return ListingDraft.model_validate(_normalize(record))


def _creation_order(records: list[dict]) -> list[dict]:
    """Oldest first, so index pairing matches the order records were created in."""
    return sorted(records, key=lambda r: str(r.get("created_at") or r.get("createdAt") or ""))


def _property_id_of(record: dict) -> Optional[str]:
    return record.get("property_id") or record.get("propertyId")


def _loaded_steps() -> dict[WizardStep, StepStatus]:
    """A stored property counts as a completed step; child and review flags are derived by the DraftStore."""
    steps = initial_steps()
    steps[WizardStep.PROPERTY] = StepStatus.of(True)
    return steps


class EditModeLoader:
    """
    Loads existing records into a DraftStore for editing.

    The store is only touched after everything was fetched and mapped; any
    failure is raised as LoadError and the store keeps its previous state.
    """

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    async def load_property(
        self,
        store: DraftStore,
        property_id: str,
        identity: Optional[Identity] = None,
    ) -> FormState:
        """Load a property with all of its units and listings."""
        with correlation_context() as correlation_id:
            try:
                with log_timing("load_property", logger=logger, property_id=property_id):
                    prop = await self._fetch_property(property_id, identity)
                    unit_records, listing_records = await asyncio.gather(
                        self.record_store.query_records(UNITS, {"property_id": property_id}),
                        self.record_store.query_records(LISTINGS, {"property_id": property_id}),
                    )
                    units = [record_to_unit_draft(r) for r in _creation_order(unit_records)]
                    listings = [record_to_listing_draft(r) for r in _creation_order(listing_records)]
            except LoadError:
                raise
            except Exception as e:
                logger.error(
                    "Failed to load property for editing",
                    correlation_id=correlation_id,
                    property_id=property_id,
                    error=mask_sensitive_data(str(e)),
                    exc_info=True
                )
                raise LoadError(f"Failed to load property {property_id}: {e}") from e

            state = FormState(
                current_step=WizardStep.PROPERTY,
                property=prop,
                units=units,
                listings=listings,
                mode=WizardMode.EDIT_PROPERTY,
                steps=_loaded_steps(),
            )
            store.replace_state(state)

            logger.info(
                "Property loaded for editing",
                correlation_id=correlation_id,
                property_id=property_id,
                units_count=len(units),
                listings_count=len(listings)
            )
            return store.state

    async def load_listing(
        self,
        store: DraftStore,
        listing_id: str,
        identity: Optional[Identity] = None,
    ) -> FormState:
        """Load one listing (and its property, read-only) and jump straight to the listings step."""
        with correlation_context() as correlation_id:
            try:
                with log_timing("load_listing", logger=logger, listing_id=listing_id):
                    record = await self.record_store.get_record(LISTINGS, listing_id)
                    if record is None:
                        raise ListingNotFoundError(listing_id)
                    listing = record_to_listing_draft(record)
                    prop = await self._fetch_property(_property_id_of(record), identity)
            except LoadError as e:
                logger.warning(
                    "Listing could not be loaded for editing",
                    correlation_id=correlation_id,
                    listing_id=listing_id,
                    error=mask_sensitive_data(str(e))
                )
                raise
            except Exception as e:
                logger.error(
                    "Failed to load listing for editing",
                    correlation_id=correlation_id,
                    listing_id=listing_id,
                    error=mask_sensitive_data(str(e)),
                    exc_info=True
                )
                raise LoadError(f"Failed to load listing {listing_id}: {e}") from e

            state = FormState(
                current_step=WizardStep.LISTINGS,
                property=prop,
                units=[],
                listings=[listing],
                mode=WizardMode.EDIT_LISTING,
                editing_listing_id=listing.record_id or listing_id,
                steps=_loaded_steps(),
            )
            store.replace_state(state)

            logger.info(
                "Listing loaded for editing",
                correlation_id=correlation_id,
                listing_id=listing_id,
                property_id=prop.record_id
            )
            return store.state

    async def _fetch_property(self, property_id: Optional[str], identity: Optional[Identity]) -> PropertyDraft:
        if not property_id:
            raise PropertyNotFoundError(property_id)

        record = await self.record_store.get_record(PROPERTIES, property_id)
        if record is None:
            raise PropertyNotFoundError(property_id)

        owner = record.get("landlord_id") or record.get("landlordId")
        if identity is not None and owner and owner != identity.user_id:
            logger.warning(
                "Refusing to load another landlord's property",
                property_id=property_id,
                landlord_id=mask_user_id(identity.user_id)
            )
            raise LoadError(f"Property {property_id} belongs to another landlord")

        return record_to_property_draft(record)
