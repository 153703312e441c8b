"""Application layer: consumers of the asset cache."""
