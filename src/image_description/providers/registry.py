"""
Provider registry

Maps provider names used in configuration (e.g. "anthropic-vlm-remote") to
provider classes. Describer modules register themselves on import.
"""

from typing import Callable, Dict, List, Optional, Type

from loguru import logger

from image_description.providers.base import BaseProvider


class ProviderRegistry:
    """Class-level name -> provider class table."""

    _providers: Dict[str, Type[BaseProvider]] = {}

    @classmethod
    def register(cls, name: str, provider_class: Type[BaseProvider]) -> None:
        """
        Add a provider class under a unique name.

        Raises:
            ValueError: Name already taken
            TypeError: provider_class is not a BaseProvider subclass
        """
        if name in cls._providers:
            raise ValueError(f"Provider '{name}' already registered")
        if not (isinstance(provider_class, type) and issubclass(provider_class, BaseProvider)):
            raise TypeError(f"{provider_class!r} must inherit from BaseProvider")

        cls._providers[name] = provider_class
        logger.debug(f"Registered provider: {name} ({provider_class.__name__})")

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._providers.pop(name, None)

    @classmethod
    def get(cls, name: str) -> Optional[Type[BaseProvider]]:
        return cls._providers.get(name)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._providers

    @classmethod
    def list_providers(cls) -> Dict[str, Type[BaseProvider]]:
        """Copy of the table, safe to mutate"""
        return dict(cls._providers)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._providers)


def register_provider(name: str) -> Callable[[Type[BaseProvider]], Type[BaseProvider]]:
    """
    Class decorator registering a provider under name.

    Names end in "-local" for in-process inference and "-remote" for
    HTTP APIs. The name also becomes the default instance name.

    Usage:
        @register_provider("groq-vlm-remote")
        class GroqVLM(OpenAICompatibleVLM):
            ...
    """
    def decorator(provider_class: Type[BaseProvider]) -> Type[BaseProvider]:
        ProviderRegistry.register(name, provider_class)
        provider_class._registered_name = name
        return provider_class
    return decorator
