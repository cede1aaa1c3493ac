"""
Host runtime interface

What the plugin needs from the agent runtime that loads it. Any object with
these members works; nothing here is implemented by this package.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Type, Union

from pydantic import BaseModel


@dataclass
class Memory:
    """A message stored in (or received from) the runtime's message history"""
    user_id: str
    agent_id: str
    room_id: str
    content: Dict[str, Any] = field(default_factory=dict)


# Delivers a response to the end user
HandlerCallback = Callable[[Dict[str, Any]], Union[Awaitable[Any], Any]]


class AgentRuntime(Protocol):
    """Agent runtime members used by the plugin"""

    agent_id: str

    def get_setting(self, key: str) -> Optional[str]:
        """Named setting (API keys, provider names) or None"""
        ...

    def get_service(self, service_type: Any) -> Any:
        """Registered service instance for a service type"""
        ...

    async def generate_object(self, context: str, schema: Type[BaseModel]) -> Any:
        """Ask the agent's small model for an object matching schema"""
        ...

    async def create_memory(self, memory: Memory) -> None:
        """Persist a message"""
        ...
