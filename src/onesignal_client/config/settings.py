from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.networks import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from onesignal_client.config.env_aliases import get_flat_env_settings_source

DEFAULT_API_URL = "https://onesignal.com/api/v1"


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class OneSignalSettings(_BaseSection):
    app_id: str = Field(min_length=1)
    api_key: SecretStr
    api_url: AnyHttpUrl = Field(default=DEFAULT_API_URL, validate_default=True)
    timeout_seconds: float = Field(default=10.0, gt=0)
    verify_tls: bool = True


class ObservabilitySettings(_BaseSection):
    log_level: str = "INFO"
    log_format: str = "human"  # json|human

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class TransportHardeningSettings(_BaseSection):
    # If true, allow httpx to read HTTP_PROXY/HTTPS_PROXY/NO_PROXY and other env settings.
    trust_env: bool = False
    # Allow plaintext HTTP for the API URL. Strongly discouraged.
    allow_insecure_http: bool = False
    # Allow disabling TLS verification. Strongly discouraged.
    allow_insecure_tls: bool = False


class HardeningSettings(_BaseSection):
    transport: TransportHardeningSettings = Field(default_factory=TransportHardeningSettings)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        extra="forbid",
    )

    onesignal: OneSignalSettings
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    hardening: HardeningSettings = Field(default_factory=HardeningSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Useful in tests where we want to pass nested dicts and keep mypy happy.
        """
        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            file_secret_settings,
        )
