"""Foundry Handhelds: a terminal dashboard for comparing handheld gaming PCs."""

__version__ = "0.1.0"
