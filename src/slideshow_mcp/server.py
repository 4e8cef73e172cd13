"""Slideshow MCP Server - MCP tools for managing and driving a product slideshow."""

from mcp.server.fastmcp import FastMCP, Context
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional

from pydantic import ValidationError

# Engine imports
from slideshow.core.errors import IndexOutOfRange
from slideshow.core.products import Product
from slideshow.core.slides import SlideShownEvent
from slideshow.core.store import InMemoryProductStore
from slideshow.slideshow import Slideshow

# Configure logging
logging.basicConfig(level=os.getenv("SLIDESHOW_LOG_LEVEL", "INFO").upper(),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("SlideshowMCP")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ── Global State ────────────────────────────────────────────────────────

_store = InMemoryProductStore()
_last_shown: Optional[SlideShownEvent] = None
_slideshow: Optional[Slideshow] = None


def _record_shown(event: SlideShownEvent):
    global _last_shown
    _last_shown = event
    logger.info(
        f"Slide {event.index + 1}/{event.total}: {event.slide.kind.value}"
        + (f" [{event.slide.source_product_id}]" if event.slide.source_product_id else "")
    )


def get_slideshow() -> Slideshow:
    global _slideshow
    if _slideshow is None:
        _slideshow = Slideshow(_store, renderer=_record_shown)
    return _slideshow


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    global _slideshow
    try:
        logger.info("SlideshowMCP server starting up")
        if _env_flag("SLIDESHOW_LOAD_SAMPLES", True) and _store.load_samples_if_empty():
            logger.info("Loaded sample products")
        get_slideshow()
        yield {}
    finally:
        if _slideshow is not None:
            _slideshow.close()
            _slideshow = None
        logger.info("SlideshowMCP server shut down")


mcp = FastMCP("SlideshowMCP", lifespan=server_lifespan)


def _playback_status() -> dict:
    status = get_slideshow().status()
    if _last_shown is not None:
        status["last_shown"] = _last_shown.model_dump(mode="json")
    return status


# ═══════════════════════════════════════════════════════════════════════
# CATALOG TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def list_products(ctx: Context) -> str:
    """List all products in the catalog, in slideshow order."""
    return json.dumps([
        {
            "id": p.id,
            "name": p.name,
            "category": p.category,
            "feature_count": len(p.features),
            "spec_count": len(p.specifications),
            "slide_duration": p.slide_duration,
        }
        for p in _store.get_products()
    ], indent=2)


@mcp.tool()
def get_product(ctx: Context, product_id: str) -> str:
    """Get full details of a single product.

    Parameters:
    - product_id: The product ID
    """
    product = _store.get_product(product_id)
    if not product:
        return f"Error: Product '{product_id}' not found"
    return product.model_dump_json(indent=2, by_alias=True)


@mcp.tool()
def add_product(ctx: Context, product_json: str) -> str:
    """Add a product to the end of the catalog. The slideshow is recompiled.

    Parameters:
    - product_json: Product as JSON. Requires "name"; optional fields are
      id, description, category, brand, features (list), specifications
      (object), images (list of {url, caption, alt}), pricing
      ({amount, currency}) and slideSettings ({duration}).
    """
    try:
        product = Product.model_validate_json(product_json)
        _store.add_product(product)
    except (ValidationError, ValueError) as e:
        return f"Error adding product: {str(e)}"
    return json.dumps({
        "status": "added",
        "id": product.id,
        "total_slides": len(get_slideshow().sequence),
    }, indent=2)


@mcp.tool()
def update_product(ctx: Context, product_id: str, product_json: str) -> str:
    """Replace a product's data, keeping its id and position.

    Parameters:
    - product_id: The product ID
    - product_json: Full replacement product as JSON (same shape as add_product)
    """
    try:
        product = Product.model_validate_json(product_json)
    except ValidationError as e:
        return f"Error updating product: {str(e)}"
    if _store.update_product(product_id, product) is None:
        return f"Error: Product '{product_id}' not found"
    return f"Product '{product_id}' updated. {len(get_slideshow().sequence)} slides."


@mcp.tool()
def remove_product(ctx: Context, product_id: str) -> str:
    """Delete a product from the catalog.

    Parameters:
    - product_id: The product ID
    """
    if _store.remove_product(product_id):
        return f"Product '{product_id}' removed. {len(_store.products)} products remaining."
    return f"Error: Product '{product_id}' not found"


@mcp.tool()
def get_settings(ctx: Context) -> str:
    """Get the current display settings."""
    return _store.get_settings().model_dump_json(indent=2)


@mcp.tool()
def update_settings(ctx: Context, default_slide_duration: Optional[float] = None,
                    auto_advance: Optional[bool] = None,
                    transition_speed_ms: Optional[int] = None) -> str:
    """Change display settings. Omitted values are left unchanged.

    Parameters:
    - default_slide_duration: Seconds for product reveal slides without their own duration
    - auto_advance: Whether slides advance automatically
    - transition_speed_ms: Transition animation length for the renderer
    """
    changes = {
        k: v for k, v in {
            "default_slide_duration": default_slide_duration,
            "auto_advance": auto_advance,
            "transition_speed_ms": transition_speed_ms,
        }.items() if v is not None
    }
    if not changes:
        return "Error: No settings provided"
    try:
        settings = _store.update_settings(**changes)
    except ValidationError as e:
        return f"Error updating settings: {str(e)}"
    return settings.model_dump_json(indent=2)


@mcp.tool()
def import_catalog(ctx: Context, catalog_json: str) -> str:
    """Import products and/or settings from an exported catalog.

    Products are replaced wholesale when present; settings are merged.

    Parameters:
    - catalog_json: JSON object with optional "products" and "settings" keys
    """
    try:
        _store.load_catalog(json.loads(catalog_json))
    except (json.JSONDecodeError, ValidationError) as e:
        return f"Error importing catalog: {str(e)}"
    return json.dumps({
        "status": "imported",
        "product_count": len(_store.products),
        "total_slides": len(get_slideshow().sequence),
    }, indent=2)


@mcp.tool()
def export_catalog(ctx: Context) -> str:
    """Export all products and settings as JSON."""
    return json.dumps(_store.snapshot(), indent=2, default=str)


# ═══════════════════════════════════════════════════════════════════════
# SLIDESHOW TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def get_slides(ctx: Context) -> str:
    """Get the compiled slide sequence."""
    return json.dumps(get_slideshow().sequence.to_summary(), indent=2)


@mcp.tool()
def start_slideshow(ctx: Context) -> str:
    """Start (or restart) the slideshow from the first slide."""
    get_slideshow().start()
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def next_slide(ctx: Context) -> str:
    """Advance to the next slide, wrapping to the first after the last."""
    get_slideshow().next()
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def previous_slide(ctx: Context) -> str:
    """Go back one slide, wrapping to the last from the first."""
    get_slideshow().previous()
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def go_to_slide(ctx: Context, index: int) -> str:
    """Jump to a specific slide.

    Parameters:
    - index: Zero-based slide index
    """
    try:
        get_slideshow().go_to(index)
    except IndexOutOfRange as e:
        return f"Error: {str(e)}"
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def toggle_play_pause(ctx: Context) -> str:
    """Pause or resume automatic advancing."""
    get_slideshow().toggle_play_pause()
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def press_key(ctx: Context, key: str) -> str:
    """Send a keyboard shortcut: ArrowRight, " " (space), ArrowLeft, Home or End.

    Parameters:
    - key: Key name
    """
    if not get_slideshow().handle_key(key):
        return f"Error: No binding for key '{key}'"
    return json.dumps(_playback_status(), indent=2)


@mcp.tool()
def get_playback_status(ctx: Context) -> str:
    """Get current slide, play state and countdown progress."""
    return json.dumps(_playback_status(), indent=2)


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
