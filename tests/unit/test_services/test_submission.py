"""Tests for the submission coordinator."""

import pytest

from property_wizard.models.form_state import WizardMode
from property_wizard.services.submission import SubmissionCoordinator, listing_payload
from property_wizard.utils.errors import SubmissionError

from tests.fixtures.drafts import LANDLORD_ID
from tests.utils.assertions import assert_stamped
from tests.utils.factories import create_listing_draft, create_unit_draft
from tests.utils.helpers import InMemoryRecordStore, build_filled_store


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_writes_linked_records(record_store, coordinator, identity):
    """Test 1 property, 2 units and 2 listings are created and linked by index."""
    store = build_filled_store(units=2, listings=2)

    result = await coordinator.submit(store.state, identity)

    assert len(record_store.calls_for("create", "properties")) == 1
    assert len(record_store.calls_for("create", "units")) == 2
    assert len(record_store.calls_for("create", "listings")) == 2
    assert result.mode == WizardMode.CREATE
    assert result.property_id == "prop_1"

    for _, _, _, payload in record_store.calls_for("create", "units"):
        assert payload["property_id"] == result.property_id
        assert_stamped(payload, LANDLORD_ID)

    listings = [record_store.rows["listings"][i] for i in result.listing_ids]
    assert [row["unit_id"] for row in listings] == result.unit_ids
    for row in listings:
        assert row["property_id"] == result.property_id
        assert row["published_at"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_property_payload_is_stamped(record_store, coordinator, identity):
    store = build_filled_store(units=0, listings=0)

    await coordinator.submit(store.state, identity)

    _, _, _, payload = record_store.calls_for("create", "properties")[0]
    assert_stamped(payload, LANDLORD_ID)
    assert payload["address"]["postal_code"] == store.state.property.address.postal_code
    assert isinstance(payload["available_date"], str)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_all_units_created_before_any_listing(record_store, coordinator, identity):
    store = build_filled_store(units=3, listings=2)

    await coordinator.submit(store.state, identity)

    collections = [call[1] for call in record_store.calls if call[0] == "create"]
    assert collections == ["properties", "units", "units", "units", "listings", "listings"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_listing_without_matching_unit_gets_empty_unit_id(record_store, coordinator, identity):
    store = build_filled_store(units=1, listings=3)

    result = await coordinator.submit(store.state, identity)

    unit_ids = [record_store.rows["listings"][i]["unit_id"] for i in result.listing_ids]
    assert unit_ids == [result.unit_ids[0], "", ""]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_without_children(record_store, coordinator, identity):
    store = build_filled_store(units=0, listings=0)

    result = await coordinator.submit(store.state, identity)

    assert result.unit_ids == [] and result.listing_ids == []
    assert [call[1] for call in record_store.calls] == ["properties"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_property_failure_writes_nothing_else(identity):
    record_store = InMemoryRecordStore(fail_on=lambda op, collection, payload: collection == "properties")
    store = build_filled_store(units=1, listings=1)

    with pytest.raises(SubmissionError) as exc_info:
        await SubmissionCoordinator(record_store).submit(store.state, identity)

    assert exc_info.value.created == {"properties": [], "units": [], "listings": []}
    assert len(record_store.calls) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unit_failure_reports_orphans(identity):
    """Test a failed unit write stops before listings and reports what exists."""
    store = build_filled_store(units=2, listings=1)
    store.on_unit_change(1, store.state.units[1].with_field("unit_number", "FAIL"))
    record_store = InMemoryRecordStore(
        fail_on=lambda op, collection, payload: payload.get("unit_number") == "FAIL"
    )

    with pytest.raises(SubmissionError) as exc_info:
        await SubmissionCoordinator(record_store).submit(store.state, identity)

    created = exc_info.value.created
    assert created["properties"] == ["prop_1"]
    assert len(created["units"]) == 1
    assert created["listings"] == []
    assert record_store.calls_for("create", "listings") == []
    # No rollback.
    assert "prop_1" in record_store.rows["properties"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_property_updates_and_creates(identity):
    record_store = InMemoryRecordStore()
    record_store.seed("properties", "prop_9", {"name": "Old"})
    record_store.seed("units", "unit_9", {"unit_number": "1"})
    record_store.seed("listings", "lst_9", {"unit_id": "unit_9"})

    store = build_filled_store(units=0, listings=0)
    state = store.state
    state.mode = WizardMode.EDIT_PROPERTY
    state.property = state.property.with_field("record_id", "prop_9")
    state.units = [create_unit_draft(record_id="unit_9"), create_unit_draft()]
    state.listings = [
        create_listing_draft(record_id="lst_9", unit_id="unit_9"),
        create_listing_draft(),
    ]

    result = await SubmissionCoordinator(record_store).submit(state, identity)

    assert result.property_id == "prop_9"
    assert record_store.rows["properties"]["prop_9"]["name"] == state.property.name
    assert len(record_store.calls_for("update", "units")) == 1
    assert len(record_store.calls_for("create", "units")) == 1
    assert result.unit_ids[0] == "unit_9"

    new_listing = record_store.rows["listings"][result.listing_ids[1]]
    assert new_listing["unit_id"] == result.unit_ids[1]
    assert new_listing["property_id"] == "prop_9"
    assert_stamped(new_listing, identity.user_id)
    assert record_store.rows["listings"]["lst_9"]["unit_id"] == "unit_9"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_property_requires_loaded_property(coordinator, identity):
    store = build_filled_store(units=0, listings=0)
    store.state.mode = WizardMode.EDIT_PROPERTY

    with pytest.raises(SubmissionError):
        await coordinator.submit(store.state, identity)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_listing_updates_only_that_listing(identity):
    record_store = InMemoryRecordStore()
    record_store.seed("listings", "lst_5", {"title": "Old title", "unit_id": "unit_5"})

    store = build_filled_store(units=0, listings=0)
    state = store.state
    state.mode = WizardMode.EDIT_LISTING
    state.editing_listing_id = "lst_5"
    state.property = state.property.with_field("record_id", "prop_5")
    state.listings = [create_listing_draft(record_id="lst_5", unit_id="unit_5", title="New title here")]

    result = await SubmissionCoordinator(record_store).submit(state, identity)

    assert result.listing_ids == ["lst_5"]
    assert [call[0:3] for call in record_store.calls] == [("update", "listings", "lst_5")]
    assert record_store.rows["listings"]["lst_5"]["title"] == "New title here"
    assert record_store.rows["listings"]["lst_5"]["unit_id"] == "unit_5"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_listing_missing_draft(coordinator, identity):
    store = build_filled_store(units=0, listings=1)
    store.state.mode = WizardMode.EDIT_LISTING
    store.state.editing_listing_id = "lst_missing"

    with pytest.raises(SubmissionError):
        await coordinator.submit(store.state, identity)


@pytest.mark.unit
def test_listing_payload_excludes_keys():
    payload = listing_payload(create_listing_draft(record_id="lst_1", unit_id="unit_1"))

    assert "record_id" not in payload
    assert "unit_id" not in payload
