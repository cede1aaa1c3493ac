"""
Unit tests for the command line interface
"""

import json

import pytest

from image_description import cli
from image_description.config import DescriptionConfig
from image_description.errors import FetchError
from image_description.providers.vision import DescriptionResult


class StubService:
    instances = []

    def __init__(self, config=None, result=None, error=None):
        self.config = config
        self.result = result
        self.error = error
        self.cleaned = False
        StubService.instances.append(self)

    async def describe_image(self, ref):
        if self.error:
            raise self.error
        return self.result

    async def cleanup(self):
        self.cleaned = True


@pytest.fixture
def stub_service(monkeypatch):
    """Patch the service the CLI creates; returns a setter for its behaviour"""
    StubService.instances = []
    behaviour = {}

    def factory(config=None):
        return StubService(config=config, **behaviour)

    monkeypatch.setattr("image_description.service.ImageDescriptionService", factory)
    monkeypatch.setattr("image_description.config.load_config", lambda path=None: DescriptionConfig())
    return behaviour


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert cli.get_version() in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_describe_prints_title_and_description(stub_service, capsys):
    stub_service["result"] = DescriptionResult(title="Cat", description="An orange cat.")

    assert cli.main(["describe", "cat.png"]) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "Cat"
    assert "An orange cat." in out
    assert StubService.instances[0].cleaned is True


def test_describe_json(stub_service, capsys):
    stub_service["result"] = DescriptionResult(title="Cat", description="An orange cat.")

    assert cli.main(["describe", "cat.png", "--json"]) == 0

    assert json.loads(capsys.readouterr().out) == {"title": "Cat", "description": "An orange cat."}


def test_describe_provider_override(stub_service):
    stub_service["result"] = DescriptionResult(title="Cat", description="")

    cli.main(["describe", "cat.png", "--provider", "groq"])

    assert StubService.instances[0].config.vision.provider == "groq"


def test_describe_error_returns_1(stub_service, capsys):
    stub_service["error"] = FetchError("Failed to fetch image: Not Found", status_code=404)

    assert cli.main(["describe", "https://example.com/missing.png"]) == 1
    assert "Not Found" in capsys.readouterr().err
    assert StubService.instances[0].cleaned is True


def test_describe_unavailable_returns_1(stub_service, capsys):
    stub_service["result"] = None

    assert cli.main(["describe", "cat.png"]) == 1
    assert "no vision provider" in capsys.readouterr().err


def test_download_model(monkeypatch, capsys):
    requested = {}

    def fake_download(models_dir=None):
        requested["models_dir"] = models_dir
        return "/models/florence-2-base-ft"

    monkeypatch.setattr("image_description.utils.model_downloader.download_vision_model", fake_download)

    assert cli.main(["download-model", "--models-dir", "/models"]) == 0
    assert requested == {"models_dir": "/models"}
    assert "/models/florence-2-base-ft" in capsys.readouterr().out


def test_download_model_failure(monkeypatch, capsys):
    def broken(repo_id, models_dir=None):
        raise OSError("disk full")

    monkeypatch.setattr("image_description.utils.model_downloader.ensure_model_downloaded", broken)

    assert cli.main(["download-model", "--repo-id", "org/other-model"]) == 1
    assert "disk full" in capsys.readouterr().err
