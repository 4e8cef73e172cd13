"""MCP server exposing the product slideshow engine."""
