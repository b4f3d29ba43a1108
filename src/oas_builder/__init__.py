"""Compile an action/route registry into an OpenAPI 3.0.1 document."""

__version__ = "0.1.0"
