"""
Image description service

The façade the host runtime calls: selects and initializes a vision provider
on first use, then runs image loading and description for each request.
"""

import asyncio
from enum import Enum
from typing import Any, Optional

from loguru import logger

from image_description.config import DescriptionConfig, config_from_settings, get_config
from image_description.loader import ImageLoader
from image_description.providers.selector import create_vision_describer
from image_description.providers.vision import DescriptionResult, VisionDescriber


class ServiceType(str, Enum):
    """Keys under which the host runtime registers services"""
    IMAGE_DESCRIPTION = "image_description"


class ImageDescriptionService:
    """
    Describes images referenced by path or URL.

    States:
    - Uninitialized: no provider yet, or the last initialization failed
    - Ready: provider selected and initialized, cached for the service lifetime

    Initialization runs under a lock so concurrent first calls create and
    initialize one provider. A failed initialization is retried on the next call.
    """

    service_type = ServiceType.IMAGE_DESCRIPTION

    def __init__(
        self,
        config: Optional[DescriptionConfig] = None,
        loader: Optional[ImageLoader] = None,
        **provider_overrides: Any,
    ):
        """
        Initialize service. No provider is created until first use.

        Args:
            config: Resolved configuration. If None, taken from the host
                    runtime in initialize() or from get_config()
            loader: Image loader (default: ImageLoader with config timeout)
            **provider_overrides: Extra describer constructor arguments
        """
        self._config = config
        self._loader = loader
        self._provider_overrides = provider_overrides
        self._provider: Optional[VisionDescriber] = None
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self.logger = logger.bind(component="ImageDescriptionService")

    @property
    def config(self) -> DescriptionConfig:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def loader(self) -> ImageLoader:
        if self._loader is None:
            self._loader = ImageLoader(timeout=self.config.vision.timeout)
        return self._loader

    @property
    def provider(self) -> Optional[VisionDescriber]:
        """The initialized provider, or None while uninitialized"""
        return self._provider if self._initialized else None

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self, runtime: Any = None) -> None:
        """
        Host lifecycle hook.

        Captures configuration from the runtime's setting accessor when no
        configuration was injected. Provider selection still happens lazily.

        Args:
            runtime: Host runtime exposing get_setting(key)
        """
        self.logger.info("Initializing ImageDescriptionService")
        if self._config is None and runtime is not None:
            self._config = config_from_settings(runtime.get_setting, base=get_config())

    async def _initialize_provider(self) -> bool:
        async with self._init_lock:
            if self._initialized:
                return True

            try:
                provider = create_vision_describer(self.config, **self._provider_overrides)
                await provider.initialize()
            except Exception as e:
                self.logger.error(
                    f"Failed to initialize the image vision model provider "
                    f"({self.config.vision.provider or self.config.agent.model_provider or 'default'}): {e}"
                )
                return False

            self._provider = provider
            self._initialized = True
            self.logger.info(f"Image vision provider ready: {provider.name}")
            return True

    async def describe_image(self, image_url_or_path: str) -> Optional[DescriptionResult]:
        """
        Describe the image at a path or URL.

        Args:
            image_url_or_path: Existing file path or URL

        Returns:
            Title and description, or None if no provider could be initialized

        Raises:
            ImageDescriptionError: Loading or describing the image failed
        """
        if not self._initialized and not await self._initialize_provider():
            return None

        try:
            payload = await self.loader.load(image_url_or_path)
            return await self._provider.describe_image(payload)
        except Exception as e:
            self.logger.error(f"Error in describe_image: {e!r}")
            raise

    async def cleanup(self) -> None:
        """Release the provider and return to the uninitialized state"""
        async with self._init_lock:
            if self._provider is not None:
                await self._provider.cleanup()
            self._provider = None
            self._initialized = False
