"""Identity provider - resolves the acting landlord."""

from typing import Protocol

from property_wizard.models.identity import Identity
from property_wizard.services.record_store import get_supabase_client
from property_wizard.utils.errors import IdentityError
from property_wizard.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


class IdentityProvider(Protocol):
    async def current_identity(self) -> Identity:
        ...


class SupabaseIdentityProvider:
    """Resolves the user behind a Supabase access token."""

    def __init__(self, access_token: str):
        self.access_token = access_token

    async def current_identity(self) -> Identity:
        if not self.access_token:
            raise IdentityError("You must be logged in to create a property")

        try:
            response = get_supabase_client().auth.get_user(self.access_token)
        except Exception as e:
            raise IdentityError(f"Failed to resolve user: {e}") from e

        user = getattr(response, "user", None)
        if user is None:
            raise IdentityError("You must be logged in to create a property")

        logger.debug("Resolved acting user", user_id=mask_user_id(str(user.id)))
        return Identity(user_id=str(user.id), email=getattr(user, "email", None))
