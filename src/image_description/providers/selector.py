"""
Vision provider selection

Picks the vision backend from configuration: an explicit vision-provider
override wins; otherwise the backend follows the agent's own model provider,
falling back to OpenAI.
"""

from typing import Any, Dict, Optional

from loguru import logger

from image_description.config.schema import DescriptionConfig, ModelProviderName, VisionProvider
from image_description.errors import ProviderInitError
from image_description.providers.factory import ProviderFactory
from image_description.providers.vision import VisionDescriber

# Registers all describers with ProviderRegistry
import image_description.providers.vision_describers  # noqa: F401

log = logger.bind(component="ProviderSelector")

# Host model-provider name -> vision backend
MODEL_PROVIDER_MAP: Dict[str, VisionProvider] = {
    ModelProviderName.LLAMALOCAL.value: VisionProvider.LOCAL,
    ModelProviderName.OLLAMA.value: VisionProvider.LOCAL,
    ModelProviderName.ANTHROPIC.value: VisionProvider.ANTHROPIC,
    ModelProviderName.GOOGLE.value: VisionProvider.GOOGLE,
    ModelProviderName.OPENAI.value: VisionProvider.OPENAI,
    ModelProviderName.GROQ.value: VisionProvider.GROQ,
}

# Accepted as override values in addition to host model-provider names
_OVERRIDE_ALIASES: Dict[str, VisionProvider] = {
    VisionProvider.LOCAL.value: VisionProvider.LOCAL,
}

REGISTERED_NAMES: Dict[VisionProvider, str] = {
    VisionProvider.LOCAL: "florence2-vlm-local",
    VisionProvider.ANTHROPIC: "anthropic-vlm-remote",
    VisionProvider.OPENAI: "openai-vlm-remote",
    VisionProvider.GROQ: "groq-vlm-remote",
    VisionProvider.GOOGLE: "google-vlm-remote",
}


def _normalize(value: Optional[str]) -> str:
    if value is None:
        return ""
    if isinstance(value, ModelProviderName):
        return value.value
    return str(value).strip().lower()


def select_vision_provider(config: DescriptionConfig) -> VisionProvider:
    """
    Choose the vision backend for a configuration.

    Args:
        config: Resolved configuration

    Returns:
        Selected VisionProvider

    Raises:
        ProviderInitError: The explicit override names an unsupported backend
    """
    override = _normalize(config.vision.provider)
    if override:
        selected = MODEL_PROVIDER_MAP.get(override) or _OVERRIDE_ALIASES.get(override)
        if selected is None:
            available = ", ".join(MODEL_PROVIDER_MAP)
            log.warning(
                f"Unsupported image vision model provider: {config.vision.provider}. "
                f"Please use one of the following: {available}. "
                f"Update the IMAGE_VISION_MODEL_PROVIDER setting."
            )
            raise ProviderInitError(f"Unsupported image vision model provider: {config.vision.provider}")
        log.debug(f"Using {selected.value} for vision model (override)")
        return selected

    model_provider = _normalize(config.agent.model_provider)
    selected = MODEL_PROVIDER_MAP.get(model_provider, VisionProvider.OPENAI)
    if model_provider not in MODEL_PROVIDER_MAP:
        log.debug("Using default openai for vision model")
    else:
        log.debug(f"Using {selected.value} for vision model")
    return selected


def describer_config(provider: VisionProvider, config: DescriptionConfig) -> Dict[str, Any]:
    """
    Build constructor arguments for a backend from configuration.

    Args:
        provider: Selected backend
        config: Resolved configuration

    Returns:
        Keyword arguments for the registered describer class
    """
    vision = config.vision
    credentials = config.credentials

    if provider == VisionProvider.LOCAL:
        return {
            "repo_id": vision.local.repo_id,
            "model_path": vision.local.model_path,
            "models_dir": vision.local.models_dir,
            "device": vision.local.device,
            "max_new_tokens": vision.local.max_new_tokens,
        }
    if provider == VisionProvider.ANTHROPIC:
        return {
            "api_key": credentials.anthropic_api_key,
            "model": vision.anthropic_model,
            "base_url": vision.anthropic_base_url,
            "max_tokens": vision.anthropic_max_tokens,
            "timeout": vision.timeout,
        }
    if provider == VisionProvider.GROQ:
        return {
            "api_key": credentials.groq_api_key,
            "model": vision.groq_model,
            "base_url": vision.groq_base_url,
            "max_tokens": vision.groq_max_tokens,
            "timeout": vision.timeout,
        }
    if provider == VisionProvider.GOOGLE:
        return {
            "api_key": credentials.google_api_key,
            "model": vision.google_model,
            "base_url": vision.google_base_url,
            "timeout": vision.timeout,
        }
    return {
        "api_key": credentials.openai_api_key,
        "model": vision.openai_model,
        "base_url": vision.openai_base_url,
        "max_tokens": vision.openai_max_tokens,
        "timeout": vision.timeout,
    }


def create_vision_describer(
    config: DescriptionConfig,
    **overrides: Any,
) -> VisionDescriber:
    """
    Select and construct the vision describer for a configuration.

    Args:
        config: Resolved configuration
        **overrides: Extra constructor arguments (e.g. transport for tests)

    Returns:
        Uninitialized VisionDescriber

    Raises:
        ProviderInitError: Unsupported override or invalid provider config
    """
    provider = select_vision_provider(config)
    name = REGISTERED_NAMES[provider]
    kwargs = describer_config(provider, config)
    kwargs.update(overrides)

    try:
        return ProviderFactory.create(name, kwargs)
    except (ValueError, TypeError) as e:
        log.error(f"Failed to create vision provider '{name}': {e}")
        raise ProviderInitError(str(e)) from e
