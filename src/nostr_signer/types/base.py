"""Reusable, strict base models for the signer."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SignerModel(BaseModel):
    """
    A base model shared by every structured value the signer exchanges.

    Field names are kept as-is (snake_case) because the Nostr wire format
    uses snake_case keys such as `created_at`.
    """

    model_config = ConfigDict(validate_default=True)

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class StrictBaseModel(SignerModel):
    """A strict, immutable pydantic base model."""

    model_config = SignerModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
