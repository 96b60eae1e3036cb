from .client import PleskClient

__all__ = ["PleskClient"]
