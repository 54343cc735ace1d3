"""
Field validators for property, unit and listing drafts.

Every validator is a pure function: it never raises and never mutates its
input, and returns an error map mirroring the draft's shape (nested groups
such as `address` or `contact_details` become nested dicts). An empty map
means the draft is valid, which also means every required field, including
the conditionally required `available_date`, is populated.
"""

import re
from datetime import date
from typing import Optional

from property_wizard.models.base import ContactDetails
from property_wizard.models.form_state import ErrorMap, FormErrors
from property_wizard.models.listing import ListingDraft
from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft


POSTAL_CODE_REGEX = re.compile(r"^\d{5}(-\d{4})?$")
PHONE_REGEX = re.compile(r"^[+]?[1-9]\d{0,15}$")
PHONE_SEPARATORS_REGEX = re.compile(r"[\s\-()]")
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

LAT_RANGE = (-90, 90)
LNG_RANGE = (-180, 180)
ROOMS_RANGE = (0, 10)
SQUARE_FEET_RANGE = (0, 10000)
RENT_RANGE = (0, 50000)
DEPOSIT_RANGE = (0, 100000)
RATING_RANGE = (1, 5)
LEASE_TERM_MONTHS_RANGE = (1, 36)
SECURITY_DEPOSIT_MONTHS_RANGE = (0, 6)
PET_DEPOSIT_RANGE = (0, 10000)
APPLICATION_FEE_RANGE = (0, 1000)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _outside(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return value < low or value > high


def _check_text(
    value: Optional[str],
    required_message: str,
    min_length: Optional[int] = None,
    min_message: Optional[str] = None,
    max_length: Optional[int] = None,
    max_message: Optional[str] = None,
) -> Optional[str]:
    """First failing message for a text field, or None."""
    if _is_blank(value):
        return required_message
    if min_length is not None and len(value) < min_length:
        return min_message
    if max_length is not None and len(value) > max_length:
        return max_message
    return None


def _set(errors: ErrorMap, key: str, message: Optional[str]) -> None:
    if message:
        errors[key] = message


def normalize_phone(phone: str) -> str:
    """Strip spaces, dashes and parentheses from a phone number."""
    return PHONE_SEPARATORS_REGEX.sub("", phone or "")


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_REGEX.match(normalize_phone(phone)))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_REGEX.match(email or ""))


def is_valid_postal_code(postal_code: str) -> bool:
    return bool(POSTAL_CODE_REGEX.match(postal_code or ""))


def validate_contact_details(details: ContactDetails) -> ErrorMap:
    errors: ErrorMap = {}

    if _is_blank(details.name):
        errors["name"] = "Contact name is required"

    if _is_blank(details.phone):
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(details.phone):
        errors["phone"] = "Invalid phone number format"

    if _is_blank(details.email):
        errors["email"] = "Email is required"
    elif not is_valid_email(details.email):
        errors["email"] = "Invalid email format"

    return errors


def _validate_lease_terms(draft, errors: ErrorMap) -> None:
    if _outside(draft.lease_term_months, LEASE_TERM_MONTHS_RANGE):
        errors["lease_term_months"] = "Lease term must be between 1 and 36 months"
    if _outside(draft.security_deposit_months, SECURITY_DEPOSIT_MONTHS_RANGE):
        errors["security_deposit_months"] = "Security deposit must be between 0 and 6 months"


def _validate_rooms(draft, errors: ErrorMap) -> None:
    if _outside(draft.bedrooms, ROOMS_RANGE):
        errors["bedrooms"] = "Bedrooms must be between 0 and 10"
    if _outside(draft.bathrooms, ROOMS_RANGE):
        errors["bathrooms"] = "Bathrooms must be between 0 and 10"


def _validate_child_money(draft, errors: ErrorMap) -> None:
    """Shared unit/listing checks: size, rent, deposits, fees."""
    if _outside(draft.square_feet, SQUARE_FEET_RANGE):
        errors["square_feet"] = "Square feet must be between 0 and 10,000"
    if _outside(draft.rent, RENT_RANGE):
        errors["rent"] = "Rent must be between $0 and $50,000"
    if _outside(draft.deposit, DEPOSIT_RANGE):
        errors["deposit"] = "Deposit must be between $0 and $100,000"
    if _outside(draft.pet_deposit, PET_DEPOSIT_RANGE):
        errors["pet_deposit"] = "Pet deposit must be between $0 and $10,000"
    if _outside(draft.application_fee, APPLICATION_FEE_RANGE):
        errors["application_fee"] = "Application fee must be between $0 and $1,000"


def _validate_address(draft: PropertyDraft) -> ErrorMap:
    address = draft.address
    errors: ErrorMap = {}

    if _is_blank(address.line1):
        errors["line1"] = "Street address is required"
    if _is_blank(address.city):
        errors["city"] = "City is required"
    if _is_blank(address.region):
        errors["region"] = "State is required"
    if _is_blank(address.postal_code):
        errors["postal_code"] = "ZIP code is required"
    elif not is_valid_postal_code(address.postal_code):
        errors["postal_code"] = "Invalid ZIP code format"
    if _is_blank(address.country):
        errors["country"] = "Country is required"

    return errors


def _validate_location(draft: PropertyDraft) -> ErrorMap:
    lat, lng = draft.location.lat, draft.location.lng

    if not lat and not lng:
        return {
            "lat": "Location coordinates are required",
            "lng": "Location coordinates are required",
        }

    errors: ErrorMap = {}
    if _outside(lat, LAT_RANGE):
        errors["lat"] = "Latitude must be between -90 and 90 degrees"
    if _outside(lng, LNG_RANGE):
        errors["lng"] = "Longitude must be between -180 and 180 degrees"
    return errors


def validate_property(draft: PropertyDraft, today: Optional[date] = None) -> ErrorMap:
    """Validate a property draft. `today` anchors the available-date check."""
    today = today or date.today()
    errors: ErrorMap = {}

    _set(errors, "name", _check_text(
        draft.name, "Property name is required",
        3, "Property name must be at least 3 characters",
        100, "Property name must be no more than 100 characters",
    ))
    _set(errors, "title", _check_text(
        draft.title, "Property title is required",
        5, "Property title must be at least 5 characters",
        200, "Property title must be no more than 200 characters",
    ))
    _set(errors, "description", _check_text(
        draft.description, "Property description is required",
        20, "Description must be at least 20 characters",
        2000, "Description must be no more than 2,000 characters",
    ))

    address_errors = _validate_address(draft)
    if address_errors:
        errors["address"] = address_errors

    location_errors = _validate_location(draft)
    if location_errors:
        errors["location"] = location_errors

    if _is_blank(draft.property_type):
        errors["property_type"] = "Property type is required"

    if draft.rent_amount <= 0:
        errors["rent_amount"] = "Rent amount must be greater than 0"
    elif draft.rent_amount > RENT_RANGE[1]:
        errors["rent_amount"] = "Rent amount must be less than $50,000"

    _validate_rooms(draft, errors)

    if draft.square_feet <= 0:
        errors["square_feet"] = "Square feet must be greater than 0"
    elif draft.square_feet > SQUARE_FEET_RANGE[1]:
        errors["square_feet"] = "Square feet must be less than 10,000"

    if _outside(draft.rating, RATING_RANGE):
        errors["rating"] = "Rating must be between 1 and 5"

    _validate_lease_terms(draft, errors)
    if not draft.lease_term_options:
        errors["lease_term_options"] = "At least one lease term option must be selected"

    if draft.is_available:
        if draft.available_date is None:
            errors["available_date"] = "Available date is required when the property is available"
        elif draft.available_date < today:
            errors["available_date"] = "Available date cannot be in the past"

    contact_errors = validate_contact_details(draft.contact_details)
    if contact_errors:
        errors["contact_details"] = contact_errors

    return errors


def validate_unit(draft: UnitDraft) -> ErrorMap:
    errors: ErrorMap = {}

    if _is_blank(draft.unit_number):
        errors["unit_number"] = "Unit number is required"
    elif len(draft.unit_number) > 20:
        errors["unit_number"] = "Unit number is too long"

    _validate_rooms(draft, errors)
    _validate_child_money(draft, errors)

    _set(errors, "description", _check_text(
        draft.description, "Unit description is required",
        10, "Description must be at least 10 characters",
        1000, "Description must be no more than 1,000 characters",
    ))

    _validate_lease_terms(draft, errors)

    if draft.available and draft.available_date is None:
        errors["available_date"] = "Available date is required when the unit is available"

    contact_errors = validate_contact_details(draft.contact_details)
    if contact_errors:
        errors["contact_details"] = contact_errors

    return errors


def validate_listing(draft: ListingDraft) -> ErrorMap:
    errors: ErrorMap = {}

    _set(errors, "title", _check_text(
        draft.title, "Listing title is required",
        5, "Title must be at least 5 characters",
        200, "Title must be no more than 200 characters",
    ))
    _set(errors, "description", _check_text(
        draft.description, "Listing description is required",
        20, "Description must be at least 20 characters",
        2000, "Description must be no more than 2,000 characters",
    ))

    _validate_rooms(draft, errors)
    _validate_child_money(draft, errors)
    _validate_lease_terms(draft, errors)

    if draft.available and draft.available_date is None:
        errors["available_date"] = "Available date is required when the listing is available"

    if (
        draft.lease_start_date is not None
        and draft.lease_end_date is not None
        and draft.lease_end_date <= draft.lease_start_date
    ):
        errors["lease_end_date"] = "Lease end date must be after the lease start date"

    contact_errors = validate_contact_details(draft.contact_details)
    if contact_errors:
        errors["contact_details"] = contact_errors

    return errors


def is_property_valid(draft: PropertyDraft, today: Optional[date] = None) -> bool:
    return not validate_property(draft, today)


def is_unit_valid(draft: UnitDraft) -> bool:
    return not validate_unit(draft)


def is_listing_valid(draft: ListingDraft) -> bool:
    return not validate_listing(draft)


def count_messages(errors: ErrorMap) -> int:
    """Number of leaf messages in a (possibly nested) error map."""
    total = 0
    for value in errors.values():
        if isinstance(value, dict):
            total += count_messages(value)
        elif value:
            total += 1
    return total


def validation_summary(errors: FormErrors) -> dict:
    """Error counts per wizard section, for the review screen."""
    sections = {
        "property": count_messages(errors.property),
        "units": sum(count_messages(e) for e in errors.units.values()),
        "listings": sum(count_messages(e) for e in errors.listings.values()),
    }
    total = sum(sections.values())
    return {
        "total_errors": total,
        "has_errors": total > 0,
        "sections": sections,
    }
