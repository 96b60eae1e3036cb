"""Translation of SDK/transport failures into domain ProviderError."""
import asyncio
import logging
from contextlib import asynccontextmanager

import aiohttp

from core.domain.exceptions import ProviderError
from hostflow_sdk.errors import ProviderAPIError


logger = logging.getLogger(__name__)


@asynccontextmanager
async def provider_errors(provider: str, operation: str):
    """Re-raise ProviderAPIError, aiohttp and timeout errors as ProviderError."""
    try:
        yield
    except ProviderAPIError as exc:
        logger.error(f"{provider} {operation} failed: {exc}")
        raise ProviderError(provider, f"{operation}: {exc.message}", exc.status) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.error(f"{provider} {operation} transport error: {exc!r}")
        raise ProviderError(provider, f"{operation}: {exc!r}") from exc
