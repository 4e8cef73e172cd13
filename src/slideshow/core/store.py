"""Product catalog store: CRUD over products and settings, with change listeners."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence

from pydantic import BaseModel, Field, PrivateAttr

from .products import Pricing, Product, ProductImage, ProductSlideSettings, Settings

logger = logging.getLogger("SlideshowMCP.core.store")

Listener = Callable[[], None]


class ProductStore(Protocol):
    """What the slideshow engine reads from. The engine never writes to it."""

    def get_products(self) -> Sequence[Product]: ...

    def get_settings(self) -> Settings: ...


def sample_products() -> list[Product]:
    """Seed catalog used when a store starts out empty."""
    return [
        Product(
            id="craven-pc2500b",
            name="Craven PC2500B Display Refrigerator",
            description="Professional display refrigerator with LED lighting "
                        "and energy-efficient cooling",
            category="Commercial Refrigeration",
            brand="Craven Cooling",
            images=[ProductImage(
                url="https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=800",
                caption="Front view with LED lighting",
                alt="Craven PC2500B refrigerator front view",
            )],
            specifications={
                "Dimensions": "200cm H x 120cm W x 65cm D",
                "Energy Consumption": "3,723 kWh/year",
                "Temperature Range": "2°C to 8°C",
                "Capacity": "850 Litres",
                "Doors": "3 Glass doors",
                "Lighting": "LED strip lighting",
            },
            features=[
                "Crisp LED Lighting",
                "Cool Energy Savings",
                "Customizable Display",
                "Low Energy Performance",
            ],
            pricing=Pricing(amount=4299, currency="GBP"),
            slide_settings=ProductSlideSettings(duration=7),
        ),
        Product(
            id="sample-laptop",
            name="TechPro Ultra 15 Laptop",
            description="High-performance laptop for professionals and creators",
            category="Electronics",
            brand="TechPro",
            images=[ProductImage(
                url="https://images.unsplash.com/photo-1496181133206-80ce9b88a853?w=800",
                caption="Sleek aluminum design",
                alt="TechPro Ultra 15 laptop closed view",
            )],
            specifications={
                "Processor": "Intel Core i7-12700H",
                "Memory": "32GB DDR5",
                "Storage": "1TB NVMe SSD",
                "Display": "15.6\" 4K OLED",
                "Graphics": "NVIDIA RTX 4060",
                "Battery Life": "12 hours",
            },
            features=[
                "4K OLED Display",
                "All-day Battery Life",
                "Professional Graphics",
                "Ultra-fast Processing",
            ],
            pricing=Pricing(amount=2199, currency="GBP"),
            slide_settings=ProductSlideSettings(duration=6),
        ),
    ]


class Catalog(BaseModel):
    """Import/export payload: products plus settings."""
    products: Optional[list[Product]] = None
    settings: Optional[dict] = None


class InMemoryProductStore(BaseModel):
    """Mutable product catalog held in memory.

    Every mutation notifies subscribed listeners so the slideshow can
    recompile.
    """
    products: list[Product] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)

    _listeners: list[Listener] = PrivateAttr(default_factory=list)

    # ── ProductStore interface ──────────────────────────────────────────

    def get_products(self) -> list[Product]:
        return list(self.products)

    def get_settings(self) -> Settings:
        return self.settings

    # ── Listeners ───────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener()

    # ── Products ────────────────────────────────────────────────────────

    def get_product(self, product_id: str) -> Optional[Product]:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    def add_product(self, product: Product) -> Product:
        if self.get_product(product.id) is not None:
            raise ValueError(f"Product '{product.id}' already exists")
        self.products.append(product)
        logger.info(f"Added product {product.id} ({product.name})")
        self._notify()
        return product

    def update_product(self, product_id: str, product: Product) -> Optional[Product]:
        """Replace a product in place, keeping its position and id."""
        for i, p in enumerate(self.products):
            if p.id == product_id:
                updated = product.model_copy(update={"id": product_id})
                self.products[i] = updated
                logger.info(f"Updated product {product_id}")
                self._notify()
                return updated
        return None

    def remove_product(self, product_id: str) -> bool:
        original_len = len(self.products)
        self.products = [p for p in self.products if p.id != product_id]
        if len(self.products) < original_len:
            logger.info(f"Removed product {product_id}")
            self._notify()
            return True
        return False

    def load_samples_if_empty(self) -> bool:
        if self.products:
            return False
        self.products = sample_products()
        self._notify()
        return True

    # ── Settings ────────────────────────────────────────────────────────

    def update_settings(self, **changes) -> Settings:
        """Merge ``changes`` into the settings record and revalidate it."""
        merged = {**self.settings.model_dump(), **changes}
        self.settings = Settings.model_validate(merged)
        self._notify()
        return self.settings

    # ── Import / export ─────────────────────────────────────────────────

    def load_catalog(self, data: dict) -> None:
        """Apply an exported catalog: products are replaced, settings merged."""
        catalog = Catalog.model_validate(data)
        if catalog.products is not None:
            self.products = list(catalog.products)
        if catalog.settings is not None:
            incoming = Settings.model_validate(catalog.settings)
            self.settings = self.settings.model_copy(update={
                name: getattr(incoming, name) for name in incoming.model_fields_set
            })
        logger.info(f"Loaded catalog with {len(self.products)} products")
        self._notify()

    def snapshot(self) -> dict:
        return {
            "products": [p.model_dump(by_alias=True) for p in self.products],
            "settings": self.settings.model_dump(by_alias=True),
            "exportDate": datetime.now(timezone.utc).isoformat(),
        }
