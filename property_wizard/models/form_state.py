"""Wizard aggregate state: steps, drafts, error maps."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft
from property_wizard.models.listing import ListingDraft


class WizardStep(str, Enum):
    """Wizard steps, in their fixed order."""
    PROPERTY = "property"
    UNITS = "units"
    LISTINGS = "listings"
    REVIEW = "review"


STEP_ORDER: tuple[WizardStep, ...] = (
    WizardStep.PROPERTY,
    WizardStep.UNITS,
    WizardStep.LISTINGS,
    WizardStep.REVIEW,
)


class WizardMode(str, Enum):
    """What the wizard session will do on submit."""
    CREATE = "create"
    EDIT_PROPERTY = "edit_property"
    EDIT_LISTING = "edit_listing"


class StepStatus(BaseModel):
    """Per-step flags. `completed` mirrors `valid`."""
    completed: bool = False
    valid: bool = False

    @classmethod
    def of(cls, valid: bool) -> "StepStatus":
        return cls(completed=valid, valid=valid)


# Leaf values are message strings; nested groups map to nested dicts.
ErrorMap = dict[str, Any]


class FormErrors(BaseModel):
    """Validation errors per entity, keyed by list position for units/listings."""
    property: ErrorMap = Field(default_factory=dict)
    units: dict[int, ErrorMap] = Field(default_factory=dict)
    listings: dict[int, ErrorMap] = Field(default_factory=dict)


def initial_steps() -> dict[WizardStep, StepStatus]:
    return {step: StepStatus() for step in STEP_ORDER}


class FormState(BaseModel):
    """Everything the wizard holds while open. Mutated only by the DraftStore."""
    current_step: WizardStep = WizardStep.PROPERTY
    property: PropertyDraft = Field(default_factory=PropertyDraft)
    units: list[UnitDraft] = Field(default_factory=list)
    listings: list[ListingDraft] = Field(default_factory=list)
    errors: FormErrors = Field(default_factory=FormErrors)
    steps: dict[WizardStep, StepStatus] = Field(default_factory=initial_steps)
    is_submitting: bool = False
    is_dirty: bool = False
    mode: WizardMode = WizardMode.CREATE
    editing_listing_id: Optional[str] = Field(None, description="Listing being edited (edit_listing mode)")
