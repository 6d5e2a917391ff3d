"""Collab: authenticated identity gateway for the collaboration backend."""

__version__ = "0.1.0"
