"""Minimal FastAPI backend exposing CRUD over a single todo table."""

from todo_backend.main import create_app

__all__ = ["create_app"]
__version__ = "1.1.0"
