from .client import OpenProviderClient

__all__ = ["OpenProviderClient"]
