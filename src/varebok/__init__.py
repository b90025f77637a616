"""varebok: read-only product catalog lookup service."""

__version__ = "0.1.0"
