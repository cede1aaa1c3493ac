"""
Configuration Schema for image description

Defines the structure of configuration using Pydantic models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class VisionProvider(str, Enum):
    """Vision backends that can describe an image"""
    LOCAL = "local"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GROQ = "groq"
    GOOGLE = "google"


class ModelProviderName(str, Enum):
    """Host model-provider names the selector understands"""
    LLAMALOCAL = "llama_local"
    OLLAMA = "ollama"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENAI = "openai"
    GROQ = "groq"


class CredentialsConfig(BaseModel):
    """API keys read at call time by the remote providers"""
    anthropic_api_key: Optional[str] = Field(default=None, description="ANTHROPIC_API_KEY")
    openai_api_key: Optional[str] = Field(default=None, description="OPENAI_API_KEY")
    groq_api_key: Optional[str] = Field(default=None, description="GROQ_API_KEY")
    google_api_key: Optional[str] = Field(default=None, description="GOOGLE_GENERATIVE_AI_API_KEY")


class LocalModelConfig(BaseModel):
    """Local Florence-2 model configuration"""
    repo_id: str = Field(default="microsoft/Florence-2-base-ft", description="HuggingFace repository ID")
    model_path: Optional[str] = Field(default=None, description="Pre-downloaded model directory")
    models_dir: Optional[str] = Field(default=None, description="Base directory for downloads")
    device: Optional[str] = Field(default=None, description="Torch device (default: cuda if available)")
    max_new_tokens: int = Field(default=256, description="Generation length limit")


class VisionConfig(BaseModel):
    """Vision provider selection and per-provider request settings"""
    provider: Optional[str] = Field(default=None, description="Explicit vision provider override")
    timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    anthropic_base_url: str = Field(default="https://api.anthropic.com/v1")
    anthropic_model: str = Field(default="claude-3-haiku-20240307")
    anthropic_max_tokens: int = Field(default=1024)

    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4o-mini")
    openai_max_tokens: int = Field(default=500)

    groq_base_url: str = Field(default="https://api.groq.com/openai/v1")
    groq_model: str = Field(default="llama-3.2-90b-vision-preview")
    groq_max_tokens: int = Field(default=1024)

    google_base_url: str = Field(default="https://generativelanguage.googleapis.com")
    google_model: str = Field(default="gemini-1.5-pro")

    local: LocalModelConfig = Field(default_factory=LocalModelConfig)


class AgentConfig(BaseModel):
    """The agent's primary text-generation backend"""
    model_provider: Optional[str] = Field(default=None, description="Agent model provider (e.g. 'anthropic')")


class DescriptionConfig(BaseModel):
    """
    Main image description configuration.

    Resolved once and injected into the service and providers; nothing reads
    process-wide settings after construction.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    vision: VisionConfig = Field(default_factory=VisionConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)

    log_level: str = Field(default="INFO", description="Log level")
