"""
Application package initializer.

``core`` holds configuration, logging, errors and the document store
gateway; ``schemas`` the pydantic models; ``services`` the entity
lifecycle rules; ``api`` the HTTP routes.
"""

from .main import app  # noqa: F401
