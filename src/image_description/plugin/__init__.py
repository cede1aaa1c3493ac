"""
Host runtime plugin

Bundles the image description service and the DESCRIBE_IMAGE action in the
shape the agent runtime loads.

Usage:
    from image_description.plugin import create_plugin

    plugin = create_plugin()
    runtime.register_plugin(plugin)
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from image_description.config import DescriptionConfig
from image_description.plugin.actions import Action, describe_image_action
from image_description.plugin.runtime import AgentRuntime, Memory
from image_description.plugin.templates import FILE_LOCATION_TEMPLATE, compose_context
from image_description.plugin.types import FileLocationResult, parse_file_location
from image_description.service import ImageDescriptionService, ServiceType


@dataclass
class Plugin:
    """Services and actions contributed to the host runtime"""
    name: str
    description: str
    services: List[Any] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)


def create_plugin(config: Optional[DescriptionConfig] = None) -> Plugin:
    """
    Create the image description plugin.

    Args:
        config: Explicit configuration. If None, the service reads the host
                runtime's settings when the runtime initializes it.
    """
    return Plugin(
        name="image-description",
        description="Describe images referenced by path or URL",
        services=[ImageDescriptionService(config=config)],
        actions=[describe_image_action],
    )


__all__ = [
    "Plugin",
    "create_plugin",
    "Action",
    "describe_image_action",
    "AgentRuntime",
    "Memory",
    "FILE_LOCATION_TEMPLATE",
    "compose_context",
    "FileLocationResult",
    "parse_file_location",
    "ImageDescriptionService",
    "ServiceType",
]
