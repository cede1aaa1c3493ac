"""
Unit tests for configuration loading
"""

import pytest
from pydantic import ValidationError

from image_description.config import (
    DescriptionConfig,
    DescriptionSettings,
    config_from_settings,
    get_config,
    load_config,
    reload_config,
    set_config,
)

ENV_KEYS = [
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "GROQ_API_KEY",
    "GOOGLE_GENERATIVE_AI_API_KEY",
    "IMAGE_VISION_MODEL_PROVIDER",
    "MODEL_PROVIDER",
    "IMAGE_DESCRIPTION_CONFIG_FILE",
    "IMAGE_DESCRIPTION_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty working directory and no relevant environment variables"""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults(clean_env):
    config = load_config()

    assert config.vision.provider is None
    assert config.agent.model_provider is None
    assert config.credentials.openai_api_key is None
    assert config.vision.timeout == 30.0
    assert config.vision.openai_model == "gpt-4o-mini"
    assert config.vision.local.repo_id == "microsoft/Florence-2-base-ft"
    assert config.log_level == "INFO"


def test_environment_variables(clean_env, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("IMAGE_VISION_MODEL_PROVIDER", "google")
    monkeypatch.setenv("MODEL_PROVIDER", "anthropic")
    monkeypatch.setenv("IMAGE_DESCRIPTION_LOG_LEVEL", "DEBUG")

    config = load_config()

    assert config.credentials.openai_api_key == "sk-env"
    assert config.vision.provider == "google"
    assert config.agent.model_provider == "anthropic"
    assert config.log_level == "DEBUG"


def test_dotenv_file(clean_env):
    (clean_env / ".env").write_text("GROQ_API_KEY=gsk-dotenv\nMODEL_PROVIDER=groq\n")

    config = load_config()

    assert config.credentials.groq_api_key == "gsk-dotenv"
    assert config.agent.model_provider == "groq"


def test_yaml_file(clean_env):
    (clean_env / "config.yaml").write_text(
        "vision:\n"
        "  provider: anthropic\n"
        "  timeout: 10\n"
        "  anthropic_model: claude-3-5-sonnet-latest\n"
        "  local:\n"
        "    device: cpu\n"
        "credentials:\n"
        "  anthropic_api_key: yaml-key\n"
    )

    config = load_config()

    assert config.vision.provider == "anthropic"
    assert config.vision.timeout == 10.0
    assert config.vision.anthropic_model == "claude-3-5-sonnet-latest"
    assert config.vision.local.device == "cpu"
    assert config.credentials.anthropic_api_key == "yaml-key"


def test_environment_overrides_yaml(clean_env, monkeypatch):
    (clean_env / "custom.yaml").write_text(
        "vision:\n"
        "  provider: anthropic\n"
        "credentials:\n"
        "  anthropic_api_key: yaml-key\n"
    )
    monkeypatch.setenv("IMAGE_DESCRIPTION_CONFIG_FILE", "custom.yaml")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")

    config = load_config()

    assert config.vision.provider == "anthropic"
    assert config.credentials.anthropic_api_key == "env-key"


def test_invalid_yaml_falls_back_to_defaults(clean_env):
    (clean_env / "config.yaml").write_text("vision: [unclosed\n")

    config = load_config()

    assert config.vision.provider is None


def test_explicit_settings_object(clean_env):
    settings = DescriptionSettings(openai_api_key="sk-explicit", IMAGE_DESCRIPTION_CONFIG_FILE=None)

    config = load_config(env_settings=settings)

    assert config.credentials.openai_api_key == "sk-explicit"


def test_config_from_settings():
    settings = {
        "ANTHROPIC_API_KEY": "sk-ant",
        "IMAGE_VISION_MODEL_PROVIDER": "anthropic",
        "MODEL_PROVIDER": "",
    }
    base = DescriptionConfig(agent={"model_provider": "openai"}, vision={"timeout": 12})

    config = config_from_settings(settings.get, base=base)

    assert config.credentials.anthropic_api_key == "sk-ant"
    assert config.vision.provider == "anthropic"
    assert config.vision.timeout == 12.0
    # Empty settings do not clear base values
    assert config.agent.model_provider == "openai"


def test_config_is_frozen():
    config = DescriptionConfig()

    with pytest.raises(ValidationError):
        config.log_level = "DEBUG"


def test_global_config(clean_env, monkeypatch):
    custom = DescriptionConfig(log_level="WARNING")
    set_config(custom)
    assert get_config() is custom

    monkeypatch.setenv("IMAGE_DESCRIPTION_LOG_LEVEL", "ERROR")
    reloaded = reload_config()

    assert reloaded.log_level == "ERROR"
    assert get_config() is reloaded
    set_config(None)
