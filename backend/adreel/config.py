"""Configuration management with YAML and environment variable support."""

from pathlib import Path
from typing import ClassVar, Literal, Optional

import yaml
from pydantic import AliasChoices, BaseModel, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads configuration from YAML file."""

    def get_field_value(self, field, field_name: str):
        # Not used with prepare method
        pass

    def prepare_field_value(self, field_name: str, field, value, value_is_complex: bool):
        return value

    def __call__(self):
        yaml_path = Path("config.yaml")
        if not yaml_path.exists():
            return {}

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return data


class GeminiConfig(BaseModel):
    """Model identifiers used for each generation call."""

    text_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.5-flash"
    temperature: float = 0.8


class GatewayConfig(BaseModel):
    """How the model service is reached.

    transport "direct" calls the Gemini API with the locally held key,
    "relay" posts to a backend that keeps the key server-side.
    """

    transport: Literal["direct", "relay"] = "direct"
    relay_url: str = "http://localhost:8000"
    timeout_seconds: Optional[float] = None
    max_attempts: int = Field(default=1, ge=1)


class WizardConfig(BaseModel):
    """Wizard behaviour switches."""

    # Reject (instead of only logging) outputs that break the 5x3 / N-prompt counts
    strict_counts: bool = False


class ServerConfig(BaseModel):
    """Relay server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]


class Settings(BaseSettings):
    """Main application settings with YAML and environment variable support.

    Configuration sources (in priority order):
    1. Environment variables (prefix: ADREEL_, delimiter: __)
    2. .env file
    3. YAML file (config.yaml)
    4. Field defaults

    The API key is also read from a plain GEMINI_API_KEY variable.
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="ADREEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gemini_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "ADREEL_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
    )
    gemini: GeminiConfig = GeminiConfig()
    gateway: GatewayConfig = GatewayConfig()
    wizard: WizardConfig = WizardConfig()
    server: ServerConfig = ServerConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        """Customize settings sources to include YAML configuration.

        Priority order (highest to lowest):
        1. Init settings (explicit keyword arguments)
        2. Environment variables
        3. .env file
        4. YAML file
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    def api_key_value(self) -> Optional[str]:
        """Return the plain API key, or None when unset or blank."""
        if self.gemini_api_key is None:
            return None
        value = self.gemini_api_key.get_secret_value().strip()
        return value or None


# Singleton instance
settings = Settings()
