"""Compiled slide data model."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import EmptySequenceInvariantViolation


class SlideKind(str, Enum):
    WELCOME = "welcome"
    BRAND_INTRO = "brand-intro"
    PRODUCT_REVEAL = "product-reveal"
    FEATURES = "features"
    SPECIFICATIONS = "specifications"


class Slide(BaseModel):
    """One compiled unit of the presentation.

    Durations are resolved when the sequence is compiled and never
    change afterwards.
    """
    model_config = ConfigDict(frozen=True)

    kind: SlideKind
    duration_seconds: float = Field(gt=0)
    source_product_id: Optional[str] = None

    @property
    def duration_ms(self) -> float:
        return self.duration_seconds * 1000.0


class SlideSequence(BaseModel):
    """Ordered, non-empty list of compiled slides."""
    model_config = ConfigDict(frozen=True)

    slides: tuple[Slide, ...]

    @model_validator(mode="after")
    def _check_not_empty(self) -> "SlideSequence":
        if not self.slides:
            raise EmptySequenceInvariantViolation(
                "A slide sequence must contain at least one slide"
            )
        return self

    def __len__(self) -> int:
        return len(self.slides)

    def __getitem__(self, index: int) -> Slide:
        return self.slides[index]

    @property
    def kinds(self) -> list[SlideKind]:
        return [s.kind for s in self.slides]

    @property
    def total_duration(self) -> float:
        return sum(s.duration_seconds for s in self.slides)

    def to_summary(self) -> list[dict]:
        return [
            {
                "index": i,
                "kind": s.kind.value,
                "duration": f"{s.duration_seconds:g}s",
                "product_id": s.source_product_id,
            }
            for i, s in enumerate(self.slides)
        ]


class SlideShownEvent(BaseModel):
    """Payload handed to the renderer on every slide transition."""
    model_config = ConfigDict(frozen=True)

    slide: Slide
    index: int
    total: int
