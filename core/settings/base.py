# core/settings/base.py
from pydantic_settings import BaseSettings, SettingsConfigDict


def section_config(env_prefix: str) -> SettingsConfigDict:
    """Shared settings config: read `.env`, prefix per section, ignore unrelated keys."""
    return SettingsConfigDict(
        env_prefix=env_prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class HostflowBaseSettings(BaseSettings):
    model_config = section_config("HOSTFLOW_")
