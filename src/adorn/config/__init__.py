"""Configuration module using Pydantic Settings.

Usage:
    from adorn.config import DecorationSettings

    settings = DecorationSettings(log_layering=True)
"""

from adorn.config.settings import DecorationSettings

__all__ = [
    "DecorationSettings",
]
