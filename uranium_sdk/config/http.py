"""HTTP client configuration for the Uranium API and presigned storage URLs."""

import httpx
from .settings import Settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


def get_api_client(settings: Settings) -> httpx.AsyncClient:
    """
    Get HTTP client for the Uranium API.
    Every request carries the API key and a JSON content type.
    """
    if not settings.api_key:
        raise ValueError(
            "API key is required. Get your API key from: "
            "https://portal.uranium.pro/dashboard/profile/api-keys"
        )

    event_hooks = {}
    if settings.debug:
        event_hooks = {"request": [_log_request], "response": [_log_response]}

    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=settings.timeout,
        headers={
            "Content-Type": "application/json",
            "x-auth-token": settings.api_key,
        },
        event_hooks=event_hooks,
    )


def get_storage_client(settings: Settings) -> httpx.AsyncClient:
    """
    Get HTTP client for chunk PUTs.
    Presigned URLs carry their own authorization, so no API headers are sent.
    """
    return httpx.AsyncClient(timeout=settings.timeout)


async def _log_request(request: httpx.Request) -> None:
    logger.debug("API request", method=request.method, url=str(request.url))


async def _log_response(response: httpx.Response) -> None:
    logger.debug(
        "API response",
        status_code=response.status_code,
        method=response.request.method,
        url=str(response.request.url),
    )
