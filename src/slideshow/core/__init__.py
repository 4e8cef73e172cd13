"""Core models: products, settings, compiled slides, catalog store."""
