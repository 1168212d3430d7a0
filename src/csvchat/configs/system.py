from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, Field

PROVIDER_GOOGLE_GENAI = "google_genai"
PROVIDER_OPENAI = "openai"


class SafetySetting(BaseModel):
    """One provider-side content filter (category + block threshold)."""

    category: str = Field(
        default="HARM_CATEGORY_DANGEROUS_CONTENT",
        description="Harm category name, e.g. HARM_CATEGORY_DANGEROUS_CONTENT",
    )
    threshold: str = Field(
        default="BLOCK_MEDIUM_AND_ABOVE",
        description="Block threshold name, e.g. BLOCK_MEDIUM_AND_ABOVE",
    )


class LLMConfig(BaseModel):
    """Text-generation provider settings."""

    provider: Literal["google_genai", "openai"] = Field(
        default=PROVIDER_GOOGLE_GENAI,
        description="Which langchain chat model backs the generator",
    )
    model_name: str = Field(
        default="gemini-2.0-flash", description="Provider model identifier"
    )
    api_key: str | None = Field(default=None, description="Provider API key")
    endpoint: str | None = Field(
        default=None,
        description="Base URL for OpenAI-compatible endpoints (openai provider only)",
    )
    temperature: float = Field(
        default=0.7, description="Sampling temperature for model responses"
    )
    top_p: float | None = Field(
        default=None, description="Top-p sampling parameter for model responses"
    )
    model_timeout: timedelta | None = Field(
        default=None,
        description="Transport timeout for a single provider call; unset means none",
    )
    max_retries: int = Field(
        default=0,
        description="Client-side retries; 0 leaves resubmission to the caller",
    )
    safety_settings: list[SafetySetting] = Field(
        default_factory=lambda: [SafetySetting()],
        description="Content-safety filters passed with every request",
    )


class APIConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8080, description="API server port")


class ChatConfig(BaseModel):
    """Configuration for chat settings."""

    max_conversation_length: int = Field(
        default=10, description="Maximum conversation history length"
    )
    max_response_tokens: int = Field(
        default=2048, description="Maximum estimated tokens in a single response"
    )


class PromptConfig(BaseModel):
    """System prompt configuration."""

    system_prompt: str | None = Field(
        default=None,
        description="Overrides the built-in data-analyst system instruction",
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )
    quiet_loggers: list[str] = Field(
        default_factory=lambda: [
            "httpx",
            "httpcore",
            "opentelemetry",
            "langchain_core",
            "langchain_google_genai",
            "google_genai",
            "google.auth",
            "openai",
            "urllib3",
        ],
        description="Third-party loggers capped at WARNING",
    )


class MetricsConfig(BaseModel):
    """Prometheus exposition settings."""

    enabled: bool = Field(default=True, description="Expose /metrics")
    endpoint: str = Field(default="/metrics", description="Metrics route")


class TracingConfig(BaseModel):
    """OpenTelemetry tracing settings."""

    enabled: bool = Field(default=False, description="Enable OTLP tracing")
    service_name: str = Field(default="csvchat", description="OTEL service.name")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic auth user for the collector")
    password: str = Field(default="", description="Basic auth password")
    sample_rate: float = Field(
        default=1.0, description="Root sampling ratio (parent-based)"
    )
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Routes excluded from tracing and HTTP metrics",
    )
