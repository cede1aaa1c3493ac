"""
Unit tests for the DESCRIBE_IMAGE action and plugin wiring
"""

import asyncio

import pytest

from image_description.plugin import (
    FILE_LOCATION_TEMPLATE,
    FileLocationResult,
    Memory,
    compose_context,
    create_plugin,
    describe_image_action,
    parse_file_location,
)
from image_description.plugin import actions as actions_module
from image_description.providers.vision import DescriptionResult
from image_description.service import ImageDescriptionService, ServiceType


class StubService:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.refs = []

    async def describe_image(self, ref):
        self.refs.append(ref)
        if self.error:
            raise self.error
        return self.result


class FakeRuntime:
    """Minimal agent runtime"""

    agent_id = "agent-1"

    def __init__(self, service, generated=None, generate_error=None):
        self.service = service
        self.generated = generated
        self.generate_error = generate_error
        self.contexts = []
        self.memories = []

    def get_setting(self, key):
        return None

    def get_service(self, service_type):
        assert service_type == ServiceType.IMAGE_DESCRIPTION
        return self.service

    async def generate_object(self, context, schema):
        self.contexts.append((context, schema))
        if self.generate_error:
            raise self.generate_error
        return self.generated

    async def create_memory(self, memory):
        self.memories.append(memory)


@pytest.fixture
def message():
    return Memory(user_id="user-1", agent_id="agent-1", room_id="room-1", content={"text": "what is this?"})


async def drain_pending_writes():
    if actions_module._pending_writes:
        await asyncio.gather(*list(actions_module._pending_writes), return_exceptions=True)


def test_action_definition():
    assert describe_image_action.name == "DESCRIBE_IMAGE"
    assert describe_image_action.similes == ["DESCRIBE_PICTURE", "EXPLAIN_PICTURE", "EXPLAIN_IMAGE"]
    assert describe_image_action.description == "Describe an image"
    assert len(describe_image_action.examples) == 3


@pytest.mark.asyncio
async def test_validate_always_true(message):
    assert await describe_image_action.validate(FakeRuntime(StubService()), message) is True


@pytest.mark.asyncio
async def test_handler_success(message):
    service = StubService(result=DescriptionResult(title="Cat", description="An orange cat on a windowsill."))
    runtime = FakeRuntime(service, generated={"fileLocation": "https://example.com/cat.jpg"})
    replies = []

    ok = await describe_image_action.handler(
        runtime, message, {"recentMessages": "user: look at this"}, {}, replies.append
    )
    await drain_pending_writes()

    assert ok is True
    assert service.refs == ["https://example.com/cat.jpg"]
    assert replies == [{"text": "An orange cat on a windowsill."}]

    context, schema = runtime.contexts[0]
    assert "user: look at this" in context
    assert schema is FileLocationResult

    assert len(runtime.memories) == 1
    stored = runtime.memories[0]
    assert stored.user_id == "agent-1"
    assert stored.agent_id == "agent-1"
    assert stored.room_id == "room-1"
    assert stored.content == {"text": "An orange cat on a windowsill."}


@pytest.mark.asyncio
async def test_handler_awaits_async_callback(message):
    service = StubService(result=DescriptionResult(title="Cat", description="A cat."))
    runtime = FakeRuntime(service, generated={"object": {"fileLocation": "/tmp/cat.png"}})
    replies = []

    async def callback(content):
        replies.append(content)

    assert await describe_image_action.handler(runtime, message, None, None, callback) is True
    await drain_pending_writes()

    assert service.refs == ["/tmp/cat.png"]
    assert replies == [{"text": "A cat."}]


@pytest.mark.asyncio
@pytest.mark.parametrize("generated", [None, {}, {"fileLocation": ""}, {"path": "/tmp/a.png"}, "nonsense"])
async def test_handler_invalid_file_location(message, generated):
    service = StubService(result=DescriptionResult(title="Cat", description="A cat."))
    runtime = FakeRuntime(service, generated=generated)
    replies = []

    assert await describe_image_action.handler(runtime, message, {}, {}, replies.append) is False
    assert service.refs == []
    assert replies == []
    assert runtime.memories == []


@pytest.mark.asyncio
async def test_handler_generation_error(message):
    runtime = FakeRuntime(StubService(), generate_error=RuntimeError("model offline"))

    assert await describe_image_action.handler(runtime, message, {}, {}, None) is False


@pytest.mark.asyncio
async def test_handler_service_unavailable(message):
    runtime = FakeRuntime(StubService(result=None), generated={"fileLocation": "/tmp/cat.png"})
    replies = []

    assert await describe_image_action.handler(runtime, message, {}, {}, replies.append) is False
    assert replies == []
    assert runtime.memories == []


@pytest.mark.asyncio
async def test_handler_propagates_service_errors(message):
    runtime = FakeRuntime(
        StubService(error=ValueError("boom")),
        generated={"fileLocation": "/tmp/cat.png"},
    )

    with pytest.raises(ValueError):
        await describe_image_action.handler(runtime, message, {}, {}, None)


@pytest.mark.asyncio
async def test_failed_memory_write_does_not_fail_handler(message):
    class FailingRuntime(FakeRuntime):
        async def create_memory(self, memory):
            raise RuntimeError("database locked")

    service = StubService(result=DescriptionResult(title="Cat", description="A cat."))
    runtime = FailingRuntime(service, generated={"fileLocation": "/tmp/cat.png"})
    replies = []

    assert await describe_image_action.handler(runtime, message, {}, {}, replies.append) is True
    await drain_pending_writes()

    assert replies == [{"text": "A cat."}]


def test_compose_context():
    assert compose_context({"recentMessages": "user: hi"}, "{{recentMessages}}!") == "user: hi!"
    assert compose_context({}, "[{{missing}}]") == "[]"

    rendered = compose_context({"recentMessages": "user: see attached"}, FILE_LOCATION_TEMPLATE)
    assert "user: see attached" in rendered
    assert '"fileLocation"' in rendered


def test_parse_file_location():
    assert parse_file_location(FileLocationResult(fileLocation="/a.png")) == "/a.png"
    assert parse_file_location({"fileLocation": "/b.png"}) == "/b.png"
    assert parse_file_location({"file_location": "/c.png"}) == "/c.png"
    assert parse_file_location({"object": FileLocationResult(file_location="/d.png")}) == "/d.png"
    assert parse_file_location({"fileLocation": ""}) is None
    assert parse_file_location(None) is None


def test_create_plugin(sample_config):
    plugin = create_plugin(sample_config)

    assert plugin.name == "image-description"
    assert plugin.actions == [describe_image_action]
    assert len(plugin.services) == 1
    service = plugin.services[0]
    assert isinstance(service, ImageDescriptionService)
    assert service.config is sample_config
