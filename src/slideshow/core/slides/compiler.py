"""Turn a product catalog plus display settings into a slide sequence.

Sequence layout:
    no products  -> [welcome]
    otherwise    -> [brand-intro] + per product:
                    [product-reveal] (+ [features]) (+ [specifications])

Duration resolution:
    product-reveal   product.slide_settings.duration
                     -> settings.default_slide_duration
                     -> FALLBACK_DEFAULT_DURATION
    everything else  fixed per-kind value from KIND_DURATIONS
"""

import logging
import math
from typing import Optional, Sequence

from ..errors import ConfigurationError
from ..products import Product, Settings
from .slide import Slide, SlideKind, SlideSequence

logger = logging.getLogger("SlideshowMCP.core.compiler")

FALLBACK_DEFAULT_DURATION = 6.0

KIND_DURATIONS: dict[SlideKind, float] = {
    SlideKind.BRAND_INTRO: 4.0,
    SlideKind.FEATURES: 6.0,
    SlideKind.SPECIFICATIONS: 8.0,
    SlideKind.WELCOME: 10.0,
}


def _is_positive_duration(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def validate_default_duration(settings: Settings) -> float:
    """Return the settings' default duration, or raise ConfigurationError."""
    value = settings.default_slide_duration
    if not _is_positive_duration(value):
        raise ConfigurationError(
            f"default_slide_duration must be a positive number, got {value!r}"
        )
    return float(value)


def _default_duration(settings: Settings) -> float:
    try:
        return validate_default_duration(settings)
    except ConfigurationError as e:
        logger.warning(f"{e}; using {FALLBACK_DEFAULT_DURATION:g}s instead")
        return FALLBACK_DEFAULT_DURATION


def _reveal_duration(product: Product, default: float) -> float:
    override: Optional[float] = product.slide_duration
    if override is None:
        return default
    if not _is_positive_duration(override):
        logger.warning(
            f"Ignoring invalid slide duration {override!r} on product {product.id}"
        )
        return default
    return float(override)


def compile_slides(products: Sequence[Product], settings: Settings) -> SlideSequence:
    """Compile products and settings into an ordered, non-empty SlideSequence.

    Pure function: no timers, no I/O, and identical inputs always give an
    identical sequence.
    """
    if not products:
        sequence = SlideSequence(slides=(
            Slide(kind=SlideKind.WELCOME,
                  duration_seconds=KIND_DURATIONS[SlideKind.WELCOME]),
        ))
        logger.info("No products; compiled welcome slide only")
        return sequence

    default = _default_duration(settings)
    slides: list[Slide] = [
        Slide(kind=SlideKind.BRAND_INTRO,
              duration_seconds=KIND_DURATIONS[SlideKind.BRAND_INTRO]),
    ]

    for product in products:
        slides.append(Slide(
            kind=SlideKind.PRODUCT_REVEAL,
            duration_seconds=_reveal_duration(product, default),
            source_product_id=product.id,
        ))
        if product.features:
            slides.append(Slide(
                kind=SlideKind.FEATURES,
                duration_seconds=KIND_DURATIONS[SlideKind.FEATURES],
                source_product_id=product.id,
            ))
        if product.specifications:
            slides.append(Slide(
                kind=SlideKind.SPECIFICATIONS,
                duration_seconds=KIND_DURATIONS[SlideKind.SPECIFICATIONS],
                source_product_id=product.id,
            ))

    sequence = SlideSequence(slides=tuple(slides))
    logger.info(
        f"Compiled {len(sequence)} slides from {len(products)} products "
        f"({sequence.total_duration:g}s per loop)"
    )
    return sequence
