"""Bundled device dataset (``catalog.json``)."""
