"""Listing draft model - the public advertisement for a unit."""

from typing import Optional
from datetime import date
from pydantic import Field

from property_wizard.models.base import ContactDetails, LeaseTermFields


class ListingDraft(LeaseTermFields):
    """Public listing. `unit_id` is fixed once at submission from the index pairing."""
    record_id: Optional[str] = Field(None, description="Existing record ID (edit mode only)")
    unit_id: Optional[str] = Field(None, description="Unit this listing advertises")
    title: str = ""
    description: str = ""
    rent: float = 0
    deposit: float = 0
    bedrooms: int = 1
    bathrooms: float = 1
    square_feet: float = 0
    images: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    available: bool = True
    available_date: Optional[date] = None
    contact_details: ContactDetails = Field(default_factory=ContactDetails)
    pet_deposit: float = 0
    application_fee: float = 0
    lease_start_date: Optional[date] = Field(None, description="Preferred lease start")
    lease_end_date: Optional[date] = Field(None, description="Preferred lease end")
