"""Acting user identity."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """The landlord performing the wizard; stamped on every created record."""
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1, description="Stable user identifier")
    email: Optional[str] = Field(None, description="Email address")
