"""REST API for the vector handler."""

from vector_handler.api.main import app, get_handler

__all__ = ["app", "get_handler"]
