# src/coinclock/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from coinclock.shared.validators import (
    normalize_base_url,
    validate_base_url,
    validate_port,
)
from coinclock.shared.logging_conf import setup_logging

__all__ = [
    "normalize_base_url",
    "validate_base_url",
    "validate_port",
    "setup_logging",
]
