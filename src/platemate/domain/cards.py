"""Domain models for shareable plate cards."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

HASHTAG = "#PlateMateApp"


@dataclass(frozen=True)
class ThemeStyle:
    """Colors and shape of a card theme."""

    primary: str
    secondary: str
    background: str
    accent: str
    corner_radius: int
    font_weight: str


class PlateCardTheme(str, Enum):
    """Card templates a dish can be rendered with."""

    CLASSIC = "classic"
    MODERN = "modern"
    MINIMAL = "minimal"
    VIBRANT = "vibrant"
    ELEGANT = "elegant"

    @property
    def style(self) -> ThemeStyle:
        """Return the visual style for this theme."""
        return _THEME_STYLES[self]

    @classmethod
    def from_stored(cls, value: str | None) -> "PlateCardTheme":
        """Parse a stored theme name, defaulting to classic."""
        for theme in cls:
            if theme.value == value:
                return theme
        return cls.CLASSIC


_THEME_STYLES = {
    PlateCardTheme.CLASSIC: ThemeStyle(
        "#000000", "#8E8E93", "#FFFFFF", "#007AFF", 12, "regular"
    ),
    PlateCardTheme.MODERN: ThemeStyle(
        "#5856D6", "#8E8E93", "#FFFFFF", "#007AFF", 16, "medium"
    ),
    PlateCardTheme.MINIMAL: ThemeStyle(
        "#000000", "#8E8E93", "#EFEFF4", "#000000", 8, "light"
    ),
    PlateCardTheme.VIBRANT: ThemeStyle(
        "#000000", "#FFFFFF", "#FF9500", "#FF3B30", 16, "regular"
    ),
    PlateCardTheme.ELEGANT: ThemeStyle(
        "#AF52DE", "#8E8E93", "#F2F2F7", "#AF52DE", 12, "semibold"
    ),
}


class TextCustomization(BaseModel):
    """User adjustments to card typography."""

    font_scale: float = Field(default=1.0, ge=0.5, le=2.0)
    font_weight: int = Field(default=4, ge=1, le=9)


@dataclass(frozen=True)
class PlateCard:
    """Everything a renderer needs to draw a dish card."""

    dish_id: UUID
    title: str
    restaurant: str
    overall: str
    taste: float
    presentation: float
    value: float
    rating_band: str
    notes: str | None
    logged_on: datetime | None
    hashtag: str
    theme: PlateCardTheme
    style: ThemeStyle
    text: TextCustomization
    image_data: bytes | None
