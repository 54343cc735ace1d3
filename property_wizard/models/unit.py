"""Unit draft model - one rentable unit inside a property."""

from typing import Optional
from datetime import date
from pydantic import Field

from property_wizard.models.base import ContactDetails, LeaseTermFields


class UnitDraft(LeaseTermFields):
    """Rentable unit. The property foreign key is assigned at submission."""
    record_id: Optional[str] = Field(None, description="Existing record ID (edit mode only)")
    unit_number: str = Field("", description="Unit number / label")
    bedrooms: int = 1
    bathrooms: float = 1
    square_feet: float = 0
    rent: float = Field(0, description="Monthly rent")
    deposit: float = Field(0, description="Security deposit amount")
    available: bool = True
    available_date: Optional[date] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    floor_plan_image: Optional[str] = Field(None, description="Floor plan image URL")
    description: str = ""
    contact_details: ContactDetails = Field(default_factory=ContactDetails)
    pet_deposit: float = 0
    application_fee: float = 0
