"""Configuration settings using Pydantic Settings.

Provides typed decorator configuration with environment variable support.

Usage:
    from adorn.config import DecorationSettings
    from adorn import Decorator

    # Load from environment variables (ADORN_*)
    settings = DecorationSettings()
    decorator = Decorator.from_settings(settings)

    # Or override with explicit values
    settings = DecorationSettings(virtual_capabilities=False)
"""

from __future__ import annotations

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install adorn[config]"
    ) from e


class DecorationSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for Decorator instances.

    Attributes:
        virtual_capabilities: Include registered ABCs/protocols the target
            satisfies without inheriting from them.
        freeze_on_first_decorate: Freeze the registry the first time
            decorate() runs, ending the setup phase.
        log_layering: Log every layered bundle at DEBUG level.

    Environment Variables:
        ADORN_VIRTUAL_CAPABILITIES
        ADORN_FREEZE_ON_FIRST_DECORATE
        ADORN_LOG_LAYERING
    """

    model_config = SettingsConfigDict(
        env_prefix="ADORN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    virtual_capabilities: bool = True
    freeze_on_first_decorate: bool = False
    log_layering: bool = False
