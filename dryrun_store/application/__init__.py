"""Application layer: per-resource use cases and error rendering."""
