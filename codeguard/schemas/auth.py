"""Schemas for caller identity resolved from an API key."""

from pydantic import BaseModel, ConfigDict


class CurrentAccount(BaseModel):
    """Authenticated caller (account and the key used) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    key_id: int
    key_name: str
