"""Marketflow - workflow service for the organic marketplace."""

__version__ = "0.1.0"
