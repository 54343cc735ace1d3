"""Error handling utilities."""

from typing import Optional


class WizardError(Exception):
    """Base exception for the property wizard."""
    pass


class RecordStoreError(WizardError):
    """Record store (Supabase) operation error."""
    pass


class IdentityError(WizardError):
    """Acting user could not be resolved."""
    pass


class LoadError(WizardError):
    """Edit-mode loading failed; the draft store keeps its previous state."""
    pass


class PropertyNotFoundError(LoadError):
    """Referenced property record does not exist."""

    def __init__(self, property_id: Optional[str]):
        self.property_id = property_id
        super().__init__(f"Property not found: {property_id}")


class ListingNotFoundError(LoadError):
    """Referenced listing record does not exist."""

    def __init__(self, listing_id: Optional[str]):
        self.listing_id = listing_id
        super().__init__(f"Listing not found: {listing_id}")


class SubmissionError(WizardError):
    """
    Create/update of the wizard draft failed.

    `created` maps collection name to the ids that were already written
    before the failure. Nothing is rolled back.
    """

    def __init__(self, message: str, created: Optional[dict[str, list[str]]] = None):
        super().__init__(message)
        self.created = created or {}
