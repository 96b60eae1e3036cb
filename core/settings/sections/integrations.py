from pydantic import Field

from core.settings.base import HostflowBaseSettings, section_config


class SlackSettings(HostflowBaseSettings):
    """
    Slack integration settings (SLACK_*).
    Used to report permanently failed fulfillment tasks.
    """

    enabled: bool = False
    webhook_url: str = ""
    prefix: str = Field(default="[HOSTFLOW]")

    model_config = section_config("SLACK_")


class RedisSettings(HostflowBaseSettings):
    """
    Redis settings (REDIS_*).
    When enabled, order lifecycle events are appended to a Redis stream.
    """

    enabled: bool = False
    url: str = "redis://localhost:6379/0"
    stream_name: str = "hostflow:orders:stream"
    stream_maxlen: int = 10000

    model_config = section_config("REDIS_")
