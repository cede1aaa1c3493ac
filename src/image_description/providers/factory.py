"""
Provider factory

Builds a registered provider from a plain options dict, checking the options
against the provider's schema first.
"""

from typing import Any, Dict, Tuple, Type, Union

from loguru import logger

from image_description.providers.base import BaseProvider
from image_description.providers.registry import ProviderRegistry

# Schema type name -> accepted Python types
_SCHEMA_TYPES: Dict[str, Union[Type, Tuple[Type, ...]]] = {
    "string": str,
    "int": int,
    "float": (int, float),
    "bool": bool,
}


class ProviderFactory:
    """Config-driven provider construction."""

    @staticmethod
    def create(provider_name: str, config: Dict[str, Any]) -> BaseProvider:
        """
        Create a provider instance.

        Args:
            provider_name: Registered name (e.g. "google-vlm-remote")
            config: Constructor options

        Returns:
            Uninitialized provider

        Raises:
            ValueError: Unknown provider or required option missing
            TypeError: Option has the wrong type or is not accepted

        Example:
            describer = ProviderFactory.create("openai-vlm-remote", {
                "api_key": "sk-...",
                "model": "gpt-4o-mini",
            })
        """
        provider_class = ProviderRegistry.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Provider '{provider_name}' not found. "
                f"Available providers: {ProviderRegistry.names()}"
            )

        _validate_config(config, provider_class.get_config_schema(), provider_name)

        try:
            provider = provider_class(**config)
        except TypeError as e:
            raise TypeError(f"Invalid config for provider '{provider_name}': {e}") from e

        logger.info(
            f"Created provider: {provider_name} "
            f"(local={provider.is_local}, category={provider.category}, "
            f"stateful={provider.is_stateful})"
        )
        return provider


def _validate_config(config: Dict[str, Any], schema: Dict[str, Dict[str, Any]], provider_name: str) -> None:
    """
    Check options against a provider schema.

    None counts as "not set". Options missing from the schema are left for
    the constructor to reject.
    """
    for key, option in schema.items():
        value = config.get(key)
        if value is None:
            if option.get("required", False):
                raise ValueError(f"Provider '{provider_name}' missing required config: {key}")
            continue

        expected = _SCHEMA_TYPES.get(option.get("type"))
        # bool is an int subclass; reject it for numeric options
        if expected is not None and (
            not isinstance(value, expected)
            or (option.get("type") in ("int", "float") and isinstance(value, bool))
        ):
            raise TypeError(
                f"Provider '{provider_name}' config '{key}' must be {option['type']}, got {type(value).__name__}"
            )
