"""
Base provider class

Every vision backend is a provider: it declares where inference runs, whether
it holds state between calls, and the constructor options ProviderFactory
validates before building it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from loguru import logger


class BaseProvider(ABC):
    """
    Base class for all providers.

    Subclasses define:
    - is_local: inference runs in this process (True) or behind an HTTP API (False)
    - is_stateful: a loaded model or session is kept between calls
    - category: provider family, "vlm" for image describers
    - get_config_schema(): constructor options, checked by ProviderFactory
    """

    def __init__(self, name: Optional[str] = None):
        """
        Args:
            name: Name used as the log component. Defaults to the name the
                  class was registered under.
        """
        self.name = name or getattr(self.__class__, "_registered_name", self.__class__.__name__)
        self.logger = logger.bind(component=self.name)

    @property
    @abstractmethod
    def is_local(self) -> bool:
        pass

    @property
    @abstractmethod
    def is_stateful(self) -> bool:
        pass

    @property
    @abstractmethod
    def category(self) -> str:
        pass

    @classmethod
    @abstractmethod
    def get_config_schema(cls) -> Dict[str, Any]:
        """
        Describe constructor options.

        Returns:
            {option: {"type": "string"|"int"|"float"|"bool",
                      "required": bool, "default": ..., "description": str}}
        """
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the provider (load weights, check dependencies). Called once before first use."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Release whatever initialize() acquired."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
