"""Bursary application and approval pipeline API."""

__version__ = "0.1.0"
