"""Scaffold typed, unimplemented SDK stubs from an OpenAPI document."""

__version__ = "0.1.0"
