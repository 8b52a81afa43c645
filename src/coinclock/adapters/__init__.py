# src/coinclock/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Upstream (historical price source)
- Persistence (seed catalog storage)
- HTTP (read-only API)
"""

__all__ = []
