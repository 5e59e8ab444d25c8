"""Pydantic request models for the HTTP API."""

import base64
import binascii

from pydantic import BaseModel, Field, field_validator

from platemate.domain.cards import PlateCardTheme
from platemate.domain.dishes import SortOption


class DishCreate(BaseModel):
    """Payload for logging a dish."""

    name: str = ""
    restaurant_name: str = Field(min_length=1)
    notes: str | None = None
    image_base64: str | None = None
    taste_rating: float = Field(ge=0.0, le=5.0)
    presentation_rating: float = Field(ge=0.0, le=5.0)
    value_rating: float = Field(ge=0.0, le=5.0)

    @field_validator("image_base64")
    @classmethod
    def _check_base64(cls, value: str | None) -> str | None:
        if value is not None:
            decode_image(value)
        return value


class DishUpdate(BaseModel):
    """Payload for editing a dish. Omitted name and notes keep stored values."""

    name: str | None = None
    notes: str | None = None
    taste_rating: float = Field(ge=0.0, le=5.0)
    presentation_rating: float = Field(ge=0.0, le=5.0)
    value_rating: float = Field(ge=0.0, le=5.0)


class DiscoveryUpdate(BaseModel):
    """Payload for changing the live discovery query."""

    search_text: str | None = None
    min_rating: float | None = None
    sort: SortOption | None = None


class ThemeUpdate(BaseModel):
    """Payload for saving the preferred card theme."""

    theme: PlateCardTheme


def decode_image(value: str) -> bytes:
    """Decode a base64 image payload."""
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise ValueError("image_base64 is not valid base64") from exc


def encode_image(data: bytes | None) -> str | None:
    """Encode image bytes for JSON responses."""
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")
