from .client import MollieClient

__all__ = ["MollieClient"]
