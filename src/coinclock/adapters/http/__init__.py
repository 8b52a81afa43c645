# src/coinclock/adapters/http/__init__.py
"""
HTTP Adapters - FastAPI Read Layer

This package exposes the catalog and clock over HTTP.
"""

from coinclock.adapters.http.api import create_app

__all__ = ["create_app"]
