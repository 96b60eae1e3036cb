# core/settings/app.py
from functools import lru_cache

from core.settings.sections.fulfillment import FulfillmentSettings
from core.settings.sections.integrations import RedisSettings, SlackSettings
from core.settings.sections.providers import (
    MollieSettings,
    MoneybirdSettings,
    OpenProviderSettings,
    PleskSettings,
)


class AppSettings:
    """
    Central application settings aggregator.
    Settings are loaded lazily inside __init__
    to prevent eager evaluation at import time.
    """

    def __init__(self):
        self.fulfillment = FulfillmentSettings()

        self.plesk = PleskSettings()
        self.openprovider = OpenProviderSettings()
        self.moneybird = MoneybirdSettings()
        self.mollie = MollieSettings()

        self.slack = SlackSettings()
        self.redis = RedisSettings()


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()
