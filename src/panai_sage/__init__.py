"""PanAI Sage: chat backend for the PanAfrican AI Summit."""

__version__ = "1.0.0"
