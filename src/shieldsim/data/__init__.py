"""Bundled data resources (simulator settings, catalog and its schema)."""
