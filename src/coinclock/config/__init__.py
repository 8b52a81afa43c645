# src/coinclock/config/__init__.py
"""
Configuration Module

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file.
"""

from coinclock.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
