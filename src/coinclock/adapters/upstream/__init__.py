# src/coinclock/adapters/upstream/__init__.py
"""
Upstream Adapters - Price Source Clients

This package contains the client for the historical coin catalog source.
"""

from coinclock.adapters.upstream.fetcher import UpstreamFetcher

__all__ = ["UpstreamFetcher"]
