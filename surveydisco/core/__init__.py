"""Cross-cutting utilities (logging, caching)."""
