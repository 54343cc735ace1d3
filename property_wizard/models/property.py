"""Property draft models - the parent entity of the wizard."""

import os
from typing import Optional
from datetime import date
from pydantic import Field

from property_wizard.models.base import ContactDetails, DraftModel, LeaseTermFields

DEFAULT_COUNTRY = os.environ.get("DEFAULT_COUNTRY", "United States")


class Address(DraftModel):
    """Postal address of a property."""
    line1: str = Field("", description="Street address")
    line2: Optional[str] = Field(None, description="Apartment, suite, etc.")
    city: str = Field("", description="City")
    region: str = Field("", description="State / region")
    postal_code: str = Field("", description="ZIP / postal code")
    country: str = Field(DEFAULT_COUNTRY, description="Country")


class GeoLocation(DraftModel):
    """Map coordinates. (0, 0) means not yet placed."""
    lat: float = Field(0.0, description="Latitude")
    lng: float = Field(0.0, description="Longitude")


class SocialFeeds(DraftModel):
    """Optional social media handles."""
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None


class PropertyDraft(LeaseTermFields):
    """In-progress property being registered or edited."""
    record_id: Optional[str] = Field(None, description="Existing record ID (edit mode only)")
    name: str = Field("", description="Internal property name")
    title: str = Field("", description="Public title used on listings")
    description: str = Field("", description="Property description")
    address: Address = Field(default_factory=Address)
    location: GeoLocation = Field(default_factory=GeoLocation)
    bedrooms: int = Field(0, description="Number of bedrooms")
    bathrooms: float = Field(0, description="Number of bathrooms")
    square_feet: float = Field(0, description="Square footage")
    property_type: str = Field("", description="Apartment, House, Condo, ...")
    rent_amount: float = Field(0, description="Base monthly rent")
    rating: float = Field(0, description="Rating 1.0-5.0")
    is_available: bool = Field(True, description="Available for rent")
    available_date: Optional[date] = Field(None, description="Date the property becomes available")
    amenities: list[str] = Field(default_factory=list, description="Shared amenity list")
    pet_friendly: bool = False
    is_network_member: bool = Field(False, description="Listed on the partner network")
    contact_details: ContactDetails = Field(default_factory=ContactDetails)
    social_feeds: SocialFeeds = Field(default_factory=SocialFeeds)
    images: list[str] = Field(default_factory=list, description="Ordered image URLs")
