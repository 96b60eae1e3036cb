from .client import MoneybirdClient

__all__ = ["MoneybirdClient"]
