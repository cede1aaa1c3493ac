"""
DESCRIBE_IMAGE action

Resolves which image the user is talking about, describes it through the
image description service, stores the description and replies with it.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from loguru import logger

from image_description.plugin.runtime import AgentRuntime, HandlerCallback, Memory
from image_description.plugin.templates import FILE_LOCATION_TEMPLATE, compose_context
from image_description.plugin.types import FileLocationResult, parse_file_location
from image_description.service import ServiceType

log = logger.bind(component="DescribeImageAction")

# Keeps fire-and-forget memory writes alive until they finish
_pending_writes: Set[asyncio.Task] = set()


@dataclass
class Action:
    """
    Action definition for the host runtime.

    Represents something the agent can decide to do in response to a message.
    """
    name: str
    description: str
    validate: Callable[..., Awaitable[bool]]
    handler: Callable[..., Awaitable[bool]]
    similes: List[str] = field(default_factory=list)
    examples: List[List[Dict[str, Any]]] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Action({self.name})"


def _log_write_failure(task: asyncio.Task) -> None:
    _pending_writes.discard(task)
    if not task.cancelled() and task.exception() is not None:
        log.warning(f"Failed to store image description: {task.exception()!r}")


def _store_description(runtime: AgentRuntime, message: Memory, description: str) -> None:
    memory = Memory(
        user_id=message.agent_id,
        agent_id=message.agent_id,
        room_id=message.room_id,
        content={"text": description},
    )
    result = runtime.create_memory(memory)
    if inspect.isawaitable(result):
        task = asyncio.ensure_future(result)
        _pending_writes.add(task)
        task.add_done_callback(_log_write_failure)


async def validate(runtime: AgentRuntime, message: Memory) -> bool:
    return True


async def handler(
    runtime: AgentRuntime,
    message: Memory,
    state: Optional[Dict[str, Any]] = None,
    options: Optional[Dict[str, Any]] = None,
    callback: Optional[HandlerCallback] = None,
) -> bool:
    """
    Describe the image the user refers to.

    Returns:
        True when a description was delivered, False when the image could not
        be identified or no vision provider is available
    """
    context = compose_context(state or {}, FILE_LOCATION_TEMPLATE)

    try:
        generated = await runtime.generate_object(context=context, schema=FileLocationResult)
    except Exception as e:
        log.error(f"Failed to generate file location: {e!r}")
        return False

    file_location = parse_file_location(generated)
    if not file_location:
        log.error("Failed to generate file location")
        return False

    service = runtime.get_service(ServiceType.IMAGE_DESCRIPTION)
    result = await service.describe_image(file_location)
    if result is None:
        log.warning("Image description service is not available")
        return False

    _store_description(runtime, message, result.description)

    if callback is not None:
        delivered = callback({"text": result.description})
        if inspect.isawaitable(delivered):
            await delivered

    return True


describe_image_action = Action(
    name="DESCRIBE_IMAGE",
    similes=["DESCRIBE_PICTURE", "EXPLAIN_PICTURE", "EXPLAIN_IMAGE"],
    description="Describe an image",
    validate=validate,
    handler=handler,
    examples=[
        [
            {"user": "{{user1}}", "content": {"text": "Can you describe this image for me?"}},
            {"user": "{{user2}}", "content": {"text": "Let me analyze this image for you...", "action": "DESCRIBE_IMAGE"}},
            {
                "user": "{{user2}}",
                "content": {
                    "text": "I see an orange tabby cat sitting on a windowsill. The cat appears to be relaxed "
                            "and looking out the window at birds flying by. The lighting suggests it's a sunny afternoon."
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "What's in this picture?"}},
            {"user": "{{user2}}", "content": {"text": "I'll take a look at that image...", "action": "DESCRIBE_IMAGE"}},
            {
                "user": "{{user2}}",
                "content": {
                    "text": "The image shows a modern kitchen with stainless steel appliances. There's a large island "
                            "counter in the center with marble countertops."
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "Could you tell me what this image depicts?"}},
            {"user": "{{user2}}", "content": {"text": "I'll describe this image for you...", "action": "DESCRIBE_IMAGE"}},
            {
                "user": "{{user2}}",
                "content": {
                    "text": "This is a scenic mountain landscape at sunset. The peaks are snow-capped and reflected "
                            "in a calm lake below."
                },
            },
        ],
    ],
)
