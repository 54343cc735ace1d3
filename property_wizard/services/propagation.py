"""
Propagation of shared property configuration down to units and listings.

Lease terms and amenities are inherited last-write-wins: any property-level
edit of either group overwrites the corresponding fields on every child,
discarding per-child customisations. Nothing is mutated in place; touched
children come back as new draft instances in a new list, untouched lists are
returned as the very same objects.
"""

from typing import NamedTuple, TypeVar

from property_wizard.models.base import LeaseTermFields
from property_wizard.models.listing import ListingDraft
from property_wizard.models.property import PropertyDraft
from property_wizard.models.unit import UnitDraft
from property_wizard.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

ChildDraft = TypeVar("ChildDraft", UnitDraft, ListingDraft)


class PropagationResult(NamedTuple):
    units: list[UnitDraft]
    listings: list[ListingDraft]
    lease_terms_changed: bool
    amenities_changed: bool

    @property
    def children_changed(self) -> bool:
        return self.lease_terms_changed or self.amenities_changed


def lease_terms_changed(old: LeaseTermFields, new: LeaseTermFields) -> bool:
    return old.lease_terms() != new.lease_terms()


def amenities_changed(old: PropertyDraft, new: PropertyDraft) -> bool:
    return list(old.amenities) != list(new.amenities)


def apply_property_lease_terms(child: ChildDraft, prop: PropertyDraft) -> ChildDraft:
    return child.with_lease_terms(prop.lease_terms())


def apply_property_amenities(child: ChildDraft, prop: PropertyDraft) -> ChildDraft:
    """Replace the child's amenities with a copy of the property's ("sync with property")."""
    return child.with_field("amenities", list(prop.amenities))


def _rewrite(children: list, prop: PropertyDraft, lease: bool, amenities: bool) -> list:
    rewritten = []
    for child in children:
        changes = {}
        if lease:
            changes.update(prop.lease_terms().model_dump())
        if amenities:
            changes["amenities"] = list(prop.amenities)
        rewritten.append(child.with_fields(**changes))
    return rewritten


def propagate(
    old: PropertyDraft,
    new: PropertyDraft,
    units: list[UnitDraft],
    listings: list[ListingDraft],
) -> PropagationResult:
    """Bring units and listings in line with an edited property draft."""
    lease = lease_terms_changed(old, new)
    amenities = amenities_changed(old, new)

    if not (lease or amenities):
        return PropagationResult(units, listings, False, False)

    logger.debug(
        "Propagating property configuration to children",
        lease_terms_changed=lease,
        amenities_changed=amenities,
        units_count=len(units),
        listings_count=len(listings)
    )

    return PropagationResult(
        units=_rewrite(units, new, lease, amenities),
        listings=_rewrite(listings, new, lease, amenities),
        lease_terms_changed=lease,
        amenities_changed=amenities,
    )
