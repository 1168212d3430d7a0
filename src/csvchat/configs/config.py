"""Configuration management using pydantic-settings.

**Not a singleton** -- each call to ``get_app_config()`` re-reads config
from disk.  The running app validates one instance at startup (see
``csvchat.infra.lifespan``) and serves every request from it.

Priority order (highest first):

1. ConfigMap YAML (path from ``CSVCHAT_CONFIGMAP_FILE`` env var)
2. Environment variables (``CSVCHAT_`` prefix)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml``)
5. Prompt YAML (``configs/prompt.yml``)
6. Init defaults / field defaults
7. File secrets
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import (
    PROVIDER_GOOGLE_GENAI,
    APIConfig,
    ChatConfig,
    LLMConfig,
    LoggingConfig,
    MetricsConfig,
    PromptConfig,
    TracingConfig,
)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
PROMPT_CONFIG_FILE = CONFIG_DIR / "prompt.yml"

_configmap_env = os.environ.get("CSVCHAT_CONFIGMAP_FILE")
CONFIGMAP_CONFIG_FILE: Optional[Path] = Path(_configmap_env) if _configmap_env else None

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "CSVCHAT_"

DEFAULT_ENCODING = "utf-8"

# Key names used by the Google SDKs themselves.
GOOGLE_API_KEY_ENV_VARS = ("GOOGLE_GENERATIVE_AI_API_KEY", "GOOGLE_API_KEY")


class ConfigError(Exception):
    """Configuration is unusable for serving requests."""


class MissingAPIKeyError(ConfigError):
    """No provider API key is configured."""


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    api: APIConfig = Field(
        default_factory=APIConfig, description="HTTP server settings"
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Text-generation provider settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Prompt and response budgets"
    )

    prompt: PromptConfig = Field(
        default_factory=PromptConfig,
        description="System prompt configuration",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging settings"
    )

    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig, description="Prometheus settings"
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig, description="OpenTelemetry settings"
    )

    @model_validator(mode="after")
    def _fallback_google_api_key(self) -> "AppConfig":
        if self.llm.api_key or self.llm.provider != PROVIDER_GOOGLE_GENAI:
            return self
        for name in GOOGLE_API_KEY_ENV_VARS:
            value = os.environ.get(name)
            if value:
                self.llm.api_key = value
                break
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = []

        # 1. ConfigMap YAML -- highest priority
        if CONFIGMAP_CONFIG_FILE is not None and CONFIGMAP_CONFIG_FILE.is_file():
            sources.append(
                YamlConfigSettingsSource(
                    settings_cls,
                    yaml_file=CONFIGMAP_CONFIG_FILE,
                )
            )

        # 2-3. Env vars and dotenv
        sources.append(env_settings)
        sources.append(dotenv_settings)

        # 4. Static YAML
        sources.append(YamlConfigSettingsSource(settings_cls))

        # 5. Prompt YAML (separate file)
        sources.append(_PromptYamlSettingsSource(settings_cls))

        # 6-7. Init defaults and file secrets
        sources.append(init_settings)
        sources.append(file_secret_settings)

        return tuple(sources)


class _PromptYamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads prompt.yml file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        self.settings_cls = settings_cls

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Load prompt config from prompt.yml file."""
        if not PROMPT_CONFIG_FILE.exists():
            return {}

        with open(PROMPT_CONFIG_FILE, encoding=DEFAULT_ENCODING) as f:
            data = yaml.safe_load(f)
        if data and data.get("system_prompt"):
            return {"prompt": {"system_prompt": data["system_prompt"]}}
        return {}


def get_app_config() -> AppConfig:
    """Read the application configuration from all sources."""
    return AppConfig()


def validate_startup_config(config: AppConfig) -> AppConfig:
    """Check that *config* can serve requests; raise ``ConfigError`` if not."""
    if not config.llm.api_key:
        raise MissingAPIKeyError(
            "No API key configured for provider "
            f"{config.llm.provider!r}. Set CSVCHAT_LLM__API_KEY"
            + (
                " or GOOGLE_GENERATIVE_AI_API_KEY."
                if config.llm.provider == PROVIDER_GOOGLE_GENAI
                else "."
            )
        )
    if config.chat.max_response_tokens <= 0:
        raise ConfigError("chat.max_response_tokens must be positive")
    return config
