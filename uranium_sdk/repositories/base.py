"""Base repository with common API request handling."""

from typing import Any, Dict, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError
from ..config.settings import Settings
from ..core.exceptions import UraniumError
from ..utils.logger import get_logger
from ..utils.retry import with_retry

logger = get_logger(__name__)

ResponseType = TypeVar("ResponseType", bound=BaseModel)

STATUS_ERROR_CODES = {
    400: "INVALID_INPUT",
    401: "AUTH_INVALID",
    403: "AUTH_INVALID",
    404: "NOT_FOUND",
    422: "INVALID_INPUT",
}

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Authentication failed. Please check your API key.",
    403: "Access denied. Please check your permissions.",
    404: "Resource not found.",
    429: "Too many requests. Please try again later.",
}


def get_error_message(error: httpx.HTTPError) -> str:
    """Convert an HTTP error into a user-friendly message."""
    if not isinstance(error, httpx.HTTPStatusError):
        return "Network error occurred. Please check your connection."
    status = error.response.status_code
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    if status >= 500:
        return "Server error. Please try again later."
    return f"Request failed with status {status}."


class BaseApiRepository:
    """Base repository for JSON requests against the Uranium API."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        """
        Initialize repository.
        Args:
            client: HTTP client bound to the API base URL
            settings: SDK settings (retry behaviour)
        """
        self.client = client
        self.settings = settings

    async def _post(
        self, path: str, payload: BaseModel, response_model: Type[ResponseType]
    ) -> ResponseType:
        """
        POST a request schema and parse the response schema.
        Raises UraniumError (upstream kind) for transport, HTTP and API-level failures.
        """
        body = payload.model_dump(mode="json", by_alias=True, exclude_none=True)

        async def send() -> httpx.Response:
            response = await self.client.post(path, json=body)
            response.raise_for_status()
            return response

        try:
            response = await with_retry(
                send,
                enabled=self.settings.retry_enabled,
                max_retries=self.settings.retry_max_retries,
                retry_delay=self.settings.retry_delay,
                retryable_statuses=self.settings.retryable_statuses,
            )
        except httpx.HTTPError as e:
            raise self._to_error(path, e) from e

        data = self._decode(path, response)

        if data.get("status") == "error" or data.get("errorCode"):
            error_code = data.get("errorCode") or "UNKNOWN_ERROR"
            logger.warning("API error in response", path=path, error_code=error_code)
            raise UraniumError.upstream(
                f"API Error: {error_code}",
                code=error_code,
                status_code=response.status_code,
                path=path,
                data=data,
            )

        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise UraniumError.upstream(
                f"Malformed response from {path}",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
                path=path,
                errors=e.errors(include_url=False),
            ) from e

    @staticmethod
    def _decode(path: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise UraniumError.upstream(
                f"Malformed response from {path}",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
                path=path,
            ) from e
        if not isinstance(data, dict):
            raise UraniumError.upstream(
                f"Malformed response from {path}",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
                path=path,
            )
        return data

    @staticmethod
    def _to_error(path: str, error: httpx.HTTPError) -> UraniumError:
        """Map an httpx failure to an upstream error."""
        message = get_error_message(error)
        if not isinstance(error, httpx.HTTPStatusError):
            logger.warning("API request failed", path=path, error=str(error))
            return UraniumError.upstream(message, code="NETWORK_ERROR", path=path)

        status = error.response.status_code
        try:
            error_code = error.response.json().get("errorCode")
        except (ValueError, AttributeError):
            error_code = None
        if error_code:
            message = f"{message} (Error Code: {error_code})"

        logger.warning("API request failed", path=path, status_code=status, error_code=error_code)
        return UraniumError.upstream(
            message,
            code=error_code or STATUS_ERROR_CODES.get(status, "API_ERROR"),
            status_code=status,
            path=path,
        )
