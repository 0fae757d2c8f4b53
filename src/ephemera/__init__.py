"""Ephemera: disappearing-messages settings service."""

__version__ = "0.1.0"
