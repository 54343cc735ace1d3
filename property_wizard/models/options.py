"""Option catalogues offered by the wizard (amenities, property types, lease terms)."""

PROPERTY_AMENITIES: tuple[str, ...] = (
    "Air Conditioning",
    "Heating",
    "Dishwasher",
    "In-Unit Laundry",
    "Balcony",
    "Patio",
    "Garden",
    "Pool",
    "Gym",
    "Parking",
    "Pet Friendly",
    "Furnished",
    "Hardwood Floors",
    "Carpet",
    "Tile",
    "Granite Countertops",
    "Stainless Steel Appliances",
    "Walk-in Closet",
    "High Ceilings",
    "Natural Light",
    "Security System",
    "Doorman",
    "Elevator",
    "Rooftop Access",
    "Storage",
    "Utilities Included",
    "Internet Included",
    "Cable Included",
    "Near Public Transit",
    "Near Shopping",
    "Near Restaurants",
    "Near Schools",
    "Near Parks",
    "Quiet Neighborhood",
    "Safe Neighborhood",
    "Historic Building",
    "New Construction",
    "Renovated",
    "Energy Efficient",
    "Green Building",
    "Wheelchair Accessible",
    "Senior Friendly",
    "Student Friendly",
    "Family Friendly",
    "Smoking Allowed",
    "No Smoking",
    "Other",
)

PROPERTY_TYPES: tuple[str, ...] = (
    "Apartment",
    "House",
    "Condo",
    "Townhouse",
    "Studio",
    "Loft",
    "Duplex",
    "Triplex",
    "Fourplex",
    "Mobile Home",
    "Other",
)

US_STATES: tuple[str, ...] = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

# Label -> months. "Flexible" leases are billed as a 12 month term.
LEASE_TERM_MONTHS: dict[str, int] = {
    "1 Month": 1,
    "3 Months": 3,
    "6 Months": 6,
    "9 Months": 9,
    "12 Months": 12,
    "15 Months": 15,
    "18 Months": 18,
    "24 Months": 24,
    "36 Months": 36,
    "Flexible": 12,
}

LEASE_TERM_OPTIONS: tuple[str, ...] = tuple(LEASE_TERM_MONTHS)

# "Custom Amount" starts from one month and is edited by hand.
SECURITY_DEPOSIT_MONTHS: dict[str, float] = {
    "1 Month": 1,
    "1.5 Months": 1.5,
    "2 Months": 2,
    "2.5 Months": 2.5,
    "3 Months": 3,
    "Custom Amount": 1,
}

DEFAULT_LEASE_TERM_MONTHS = 12
DEFAULT_LEASE_TERM_OPTIONS: tuple[str, ...] = ("12 Months",)
DEFAULT_SECURITY_DEPOSIT_MONTHS = 1.0


def lease_term_months_for(label: str) -> int:
    """Months for a lease-term label; unknown labels fall back to the default term."""
    return LEASE_TERM_MONTHS.get(label, DEFAULT_LEASE_TERM_MONTHS)
