"""
Configuration Loader for image description

Loads configuration from multiple sources with priority:
1. Host runtime settings (when running as a plugin)
2. Environment variables (.env + named settings)
3. YAML config file
4. Default values (lowest)
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from ruamel.yaml import YAML
from loguru import logger

from image_description.config.schema import DescriptionConfig


SettingGetter = Callable[[str], Optional[str]]

# Named setting -> (config section, field)
SETTING_KEYS: Dict[str, Tuple[str, str]] = {
    "ANTHROPIC_API_KEY": ("credentials", "anthropic_api_key"),
    "OPENAI_API_KEY": ("credentials", "openai_api_key"),
    "GROQ_API_KEY": ("credentials", "groq_api_key"),
    "GOOGLE_GENERATIVE_AI_API_KEY": ("credentials", "google_api_key"),
    "IMAGE_VISION_MODEL_PROVIDER": ("vision", "provider"),
    "MODEL_PROVIDER": ("agent", "model_provider"),
}


class DescriptionSettings(BaseSettings):
    """
    Environment-based settings.

    Credentials and provider names use the same unprefixed names the host
    runtime uses; package-level settings take the IMAGE_DESCRIPTION_ prefix.

    Example:
        OPENAI_API_KEY=sk-...
        IMAGE_VISION_MODEL_PROVIDER=anthropic
        IMAGE_DESCRIPTION_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_file: Optional[str] = Field(default="config.yaml", validation_alias="IMAGE_DESCRIPTION_CONFIG_FILE")
    log_level: Optional[str] = Field(default=None, validation_alias="IMAGE_DESCRIPTION_LOG_LEVEL")

    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    google_generative_ai_api_key: Optional[str] = None
    image_vision_model_provider: Optional[str] = None
    model_provider: Optional[str] = None

    def get_setting(self, key: str) -> Optional[str]:
        """Look up a named setting the way the host runtime accessor does"""
        return getattr(self, key.lower(), None)


def _merge_settings(data: Dict[str, Any], get_setting: SettingGetter) -> Dict[str, Any]:
    """Overlay non-empty named settings onto raw config data"""
    for key, (section, field) in SETTING_KEYS.items():
        value = get_setting(key)
        if value:
            section_data = dict(data.get(section) or {})
            section_data[field] = value
            data[section] = section_data
    return data


def _read_yaml(path: Path) -> Dict[str, Any]:
    yaml = YAML(typ="safe")
    try:
        with open(path, "r", encoding="utf-8") as f:
            yaml_config = yaml.load(f)
    except Exception as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return {}

    if not isinstance(yaml_config, dict):
        return {}

    logger.debug(f"Loaded config from {path}")
    return dict(yaml_config)


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_settings: Optional[DescriptionSettings] = None,
) -> DescriptionConfig:
    """
    Load image description configuration.

    Configuration sources (priority high to low):
    1. Environment variables (.env + named settings)
    2. YAML config file (config.yaml)
    3. Default values

    Args:
        config_path: Path to YAML config file. If None, uses
                     IMAGE_DESCRIPTION_CONFIG_FILE or defaults to "config.yaml"
        env_settings: Pre-loaded environment settings

    Returns:
        DescriptionConfig instance
    """
    if env_settings is None:
        env_settings = DescriptionSettings()

    if config_path is None:
        config_path = env_settings.config_file

    config_data: Dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            config_data = _read_yaml(path)

    config_data = _merge_settings(config_data, env_settings.get_setting)
    if env_settings.log_level:
        config_data["log_level"] = env_settings.log_level

    return DescriptionConfig(**config_data)


def config_from_settings(
    get_setting: SettingGetter,
    base: Optional[DescriptionConfig] = None,
) -> DescriptionConfig:
    """
    Build configuration from a host runtime's setting accessor.

    Args:
        get_setting: Callable returning a named setting or None
        base: Configuration providing defaults for anything not set

    Returns:
        DescriptionConfig with the host's settings applied over base
    """
    data = base.model_dump() if base is not None else {}
    return DescriptionConfig(**_merge_settings(data, get_setting))


# ============================================================
# Global config management
# ============================================================

_global_config: Optional[DescriptionConfig] = None


def get_config() -> DescriptionConfig:
    """
    Get global config (lazy load).

    Auto-discovers config from:
    1. .env file in current directory
    2. config.yaml in current directory (or IMAGE_DESCRIPTION_CONFIG_FILE)
    """
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: DescriptionConfig) -> None:
    """Set global config manually"""
    global _global_config
    _global_config = config


def reload_config() -> DescriptionConfig:
    """Force reload config from files"""
    global _global_config
    _global_config = load_config()
    return _global_config
