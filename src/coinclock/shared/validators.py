# src/coinclock/shared/validators.py
"""
Input Validation Utilities - Configuration and Request Validation

This module provides validation functions for configuration values and
listen settings: upstream URLs and ports.

Files that USE this module:
- coinclock.config.settings (uses validation functions in Settings field validators)

Files that this module USES:
- None (pure utility functions)
"""
from urllib.parse import urlparse


def validate_base_url(url: str) -> bool:
    """
    Validate that a base URL is an absolute http(s) URL with a host.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False

    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_base_url(url: str) -> str:
    """Strip whitespace and trailing slashes so paths can be appended."""
    return url.strip().rstrip("/")


def validate_port(port: int) -> bool:
    """Return True for a usable TCP port number."""
    return 0 < port < 65536
