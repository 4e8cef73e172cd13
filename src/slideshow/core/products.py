"""Product catalog and display settings models."""

import uuid
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def generate_product_id() -> str:
    return f"product_{uuid.uuid4().hex[:9]}"


class ProductImage(BaseModel):
    """An image attached to a product. Only the reference is kept."""
    url: str
    caption: str = ""
    alt: str = ""


class Pricing(BaseModel):
    """Product price. Older catalogs store the amount under ``msrp``."""
    amount: float = Field(
        0.0, validation_alias=AliasChoices("amount", "msrp"),
    )
    currency: str = "GBP"


class ProductSlideSettings(BaseModel):
    """Per-product presentation overrides.

    ``duration`` only affects the product's reveal slide.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    duration: Optional[float] = None


class Product(BaseModel):
    """A single product record as held by the catalog store.

    Field names are snake_case; the camelCase keys written by older
    exports (``slideSettings``) are accepted on input.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=generate_product_id)
    name: str
    description: str = ""
    category: str = ""
    brand: str = ""
    features: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    images: list[ProductImage] = Field(default_factory=list)
    pricing: Optional[Pricing] = None
    slide_settings: Optional[ProductSlideSettings] = None

    @property
    def slide_duration(self) -> Optional[float]:
        if self.slide_settings is None:
            return None
        return self.slide_settings.duration


class Settings(BaseModel):
    """Display settings shared by every slide in a presentation.

    ``default_slide_duration`` is not range-checked here. The slide
    compiler replaces unusable values with a fallback.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    default_slide_duration: float = 6.0
    auto_advance: bool = True
    transition_speed_ms: int = Field(
        800,
        ge=0,
        validation_alias=AliasChoices(
            "transition_speed_ms", "transitionSpeedMs", "transitionSpeed",
        ),
    )
