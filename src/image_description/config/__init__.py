"""
Configuration management for image description

Usage:
    from image_description.config import load_config, get_config, DescriptionConfig

    # Load from file
    config = load_config("config.yaml")

    # Get global config (auto-loads from .env and config.yaml)
    config = get_config()

    # Build from a host runtime's settings
    config = config_from_settings(runtime.get_setting)
"""

from image_description.config.schema import (
    DescriptionConfig,
    VisionConfig,
    AgentConfig,
    CredentialsConfig,
    LocalModelConfig,
    VisionProvider,
    ModelProviderName,
)
from image_description.config.loader import (
    load_config,
    config_from_settings,
    get_config,
    set_config,
    reload_config,
    DescriptionSettings,
    SETTING_KEYS,
)

__all__ = [
    # Schema
    "DescriptionConfig",
    "VisionConfig",
    "AgentConfig",
    "CredentialsConfig",
    "LocalModelConfig",
    "VisionProvider",
    "ModelProviderName",
    # Loader
    "load_config",
    "config_from_settings",
    "get_config",
    "set_config",
    "reload_config",
    "DescriptionSettings",
    "SETTING_KEYS",
]
