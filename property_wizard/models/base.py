"""Shared draft building blocks: immutable base model, contact details, lease terms."""

from typing import Any
from pydantic import BaseModel, ConfigDict, Field

from property_wizard.models.options import (
    DEFAULT_LEASE_TERM_MONTHS,
    DEFAULT_LEASE_TERM_OPTIONS,
    DEFAULT_SECURITY_DEPOSIT_MONTHS,
)


class DraftModel(BaseModel):
    """Immutable draft record. Partial updates go through `with_field`."""
    model_config = ConfigDict(frozen=True)

    def with_field(self, name: str, value: Any):
        """Return a copy with one field replaced (type-checked, never range-checked)."""
        if name not in type(self).model_fields:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'")
        data = self.model_dump()
        data[name] = value
        return type(self).model_validate(data)

    def with_fields(self, **changes: Any):
        """Return a copy with several fields replaced."""
        unknown = [name for name in changes if name not in type(self).model_fields]
        if unknown:
            raise AttributeError(f"{type(self).__name__} has no field(s) {unknown}")
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


class ContactDetails(DraftModel):
    """Contact person shown on the property, its units and listings."""
    name: str = Field("", description="Contact name")
    phone: str = Field("", description="Contact phone number")
    email: str = Field("", description="Contact email address")


class LeaseTerms(DraftModel):
    """Lease configuration shared from a property down to its units and listings."""
    lease_term_months: int = Field(DEFAULT_LEASE_TERM_MONTHS, description="Default lease term in months")
    lease_term_options: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LEASE_TERM_OPTIONS),
        description="Offered lease-term labels"
    )
    security_deposit_months: float = Field(
        DEFAULT_SECURITY_DEPOSIT_MONTHS,
        description="Security deposit in months of rent"
    )
    first_month_rent_required: bool = Field(True, description="First month rent due upfront")
    last_month_rent_required: bool = Field(False, description="Last month rent due upfront")


LEASE_TERM_FIELDS: tuple[str, ...] = tuple(LeaseTerms.model_fields)


class LeaseTermFields(DraftModel):
    """Mixin carrying the five lease-term fields inline, as stored on every record."""
    lease_term_months: int = DEFAULT_LEASE_TERM_MONTHS
    lease_term_options: list[str] = Field(default_factory=lambda: list(DEFAULT_LEASE_TERM_OPTIONS))
    security_deposit_months: float = DEFAULT_SECURITY_DEPOSIT_MONTHS
    first_month_rent_required: bool = True
    last_month_rent_required: bool = False

    def lease_terms(self) -> LeaseTerms:
        return LeaseTerms(**{name: getattr(self, name) for name in LEASE_TERM_FIELDS})

    def with_lease_terms(self, terms: LeaseTerms):
        return self.with_fields(**terms.model_dump())
