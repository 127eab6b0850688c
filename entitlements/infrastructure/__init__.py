"""Infrastructure layer: persistence, cache, and token verification."""
