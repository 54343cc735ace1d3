"""Draft store - sole mutator of the wizard FormState."""

from datetime import date
from typing import Optional

from property_wizard.models.form_state import (
    FormState,
    StepStatus,
    WizardStep,
)
from property_wizard.models.listing import ListingDraft
from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft
from property_wizard.services.propagation import apply_property_amenities, propagate
from property_wizard.services.validators import (
    is_listing_valid,
    is_unit_valid,
    validate_listing,
    validate_property,
    validate_unit,
)
from property_wizard.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def new_form_state() -> FormState:
    """Empty wizard: blank property, no units or listings.

    Units and listings are optional collections, so their steps start out
    valid; the property step does not.
    """
    state = FormState()
    state.steps[WizardStep.UNITS] = StepStatus.of(True)
    state.steps[WizardStep.LISTINGS] = StepStatus.of(True)
    return state


def _shift_errors(errors: dict[int, dict], removed: int) -> dict[int, dict]:
    """Re-key per-item error maps after the item at `removed` is dropped."""
    shifted = {}
    for index, item_errors in errors.items():
        if index < removed:
            shifted[index] = item_errors
        elif index > removed:
            shifted[index - 1] = item_errors
    return shifted


class DraftStore:
    """
    Holds the in-progress property, unit and listing drafts.

    Handlers never reject a change because of invalid data: the draft is
    always stored, validation results land in `state.errors` and the step
    flags are recomputed from the new snapshot.
    """

    def __init__(self, state: Optional[FormState] = None, today: Optional[date] = None):
        self._state = state if state is not None else new_form_state()
        self._today = today

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def today(self) -> date:
        return self._today or date.today()

    def step_status(self, step: WizardStep) -> StepStatus:
        return self._state.steps[step]

    # Property

    def on_property_change(self, draft: PropertyDraft) -> None:
        state = self._state
        result = propagate(state.property, draft, state.units, state.listings)

        state.property = draft
        state.errors.property = validate_property(draft, self.today)
        state.steps[WizardStep.PROPERTY] = StepStatus.of(not state.errors.property)

        if result.children_changed:
            state.units = result.units
            state.listings = result.listings
            self._revalidate_children()

        self._recompute_review()
        state.is_dirty = True

        logger.debug(
            "Property draft updated",
            property_valid=state.steps[WizardStep.PROPERTY].valid,
            lease_terms_propagated=result.lease_terms_changed,
            amenities_propagated=result.amenities_changed
        )

    # Units

    def on_unit_change(self, index: int, draft: UnitDraft) -> None:
        self._check_index(self._state.units, index, "unit")
        units = list(self._state.units)
        units[index] = draft
        self._state.units = units
        self._state.errors.units[index] = validate_unit(draft)
        self._after_units_change()

    def add_unit(self) -> int:
        """Append a unit inheriting the property's shared configuration; returns its index."""
        prop = self._state.property
        unit = UnitDraft(
            amenities=list(prop.amenities),
            contact_details=prop.contact_details,
            **prop.lease_terms().model_dump()
        )
        self._state.units = [*self._state.units, unit]
        self._state.errors.units[len(self._state.units) - 1] = validate_unit(unit)
        self._after_units_change()
        return len(self._state.units) - 1

    def remove_unit(self, index: int) -> None:
        self._check_index(self._state.units, index, "unit")
        self._state.units = [u for i, u in enumerate(self._state.units) if i != index]
        self._state.errors.units = _shift_errors(self._state.errors.units, index)
        self._after_units_change()

    def sync_unit_with_property(self, index: int) -> None:
        """Overwrite one unit's amenities with the property's."""
        self._check_index(self._state.units, index, "unit")
        self.on_unit_change(index, apply_property_amenities(self._state.units[index], self._state.property))

    # Listings

    def on_listing_change(self, index: int, draft: ListingDraft) -> None:
        self._check_index(self._state.listings, index, "listing")
        listings = list(self._state.listings)
        listings[index] = draft
        self._state.listings = listings
        self._state.errors.listings[index] = validate_listing(draft)
        self._after_listings_change()

    def add_listing(self) -> int:
        """Append a listing inheriting the property's shared configuration; returns its index."""
        prop = self._state.property
        listing = ListingDraft(
            amenities=list(prop.amenities),
            contact_details=prop.contact_details,
            **prop.lease_terms().model_dump()
        )
        self._state.listings = [*self._state.listings, listing]
        self._state.errors.listings[len(self._state.listings) - 1] = validate_listing(listing)
        self._after_listings_change()
        return len(self._state.listings) - 1

    def remove_listing(self, index: int) -> None:
        self._check_index(self._state.listings, index, "listing")
        self._state.listings = [
            listing for i, listing in enumerate(self._state.listings) if i != index
        ]
        self._state.errors.listings = _shift_errors(self._state.errors.listings, index)
        self._after_listings_change()

    def sync_listing_with_property(self, index: int) -> None:
        """Overwrite one listing's amenities with the property's."""
        self._check_index(self._state.listings, index, "listing")
        self.on_listing_change(
            index, apply_property_amenities(self._state.listings[index], self._state.property)
        )

    # Session

    def set_current_step(self, step: WizardStep) -> None:
        self._state.current_step = step

    def set_submitting(self, submitting: bool) -> None:
        self._state.is_submitting = submitting

    def replace_state(self, state: FormState) -> None:
        """
        Swap in a fully built state (edit-mode loading).

        The property step flag is kept as given. Child error maps and the
        units, listings and review flags are recomputed from the drafts.
        """
        self._state = state
        self._revalidate_children()
        self._recompute_review()

    def reset(self) -> None:
        self._state = new_form_state()

    # Derived flags

    def _revalidate_children(self) -> None:
        state = self._state
        state.errors.units = {i: validate_unit(unit) for i, unit in enumerate(state.units)}
        state.errors.listings = {
            i: validate_listing(listing) for i, listing in enumerate(state.listings)
        }
        self._recompute_units()
        self._recompute_listings()

    def _after_units_change(self) -> None:
        self._recompute_units()
        self._recompute_review()
        self._state.is_dirty = True

    def _after_listings_change(self) -> None:
        self._recompute_listings()
        self._recompute_review()
        self._state.is_dirty = True

    def _recompute_units(self) -> None:
        valid = all(is_unit_valid(unit) for unit in self._state.units)
        self._state.steps[WizardStep.UNITS] = StepStatus.of(valid)

    def _recompute_listings(self) -> None:
        valid = all(is_listing_valid(listing) for listing in self._state.listings)
        self._state.steps[WizardStep.LISTINGS] = StepStatus.of(valid)

    def _recompute_review(self) -> None:
        steps = self._state.steps
        valid = all(
            steps[step].valid
            for step in (WizardStep.PROPERTY, WizardStep.UNITS, WizardStep.LISTINGS)
        )
        steps[WizardStep.REVIEW] = StepStatus.of(valid)

    @staticmethod
    def _check_index(items: list, index: int, kind: str) -> None:
        if not 0 <= index < len(items):
            raise IndexError(f"No {kind} at index {index}")
