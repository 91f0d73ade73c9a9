"""
Uranium SDK entry point.

Wires settings, HTTP clients, device identity, the assets repository and the
upload orchestrator together.
"""

from typing import Any, Optional
import httpx
from .config.http import get_api_client, get_storage_client
from .config.settings import Settings
from .core.byte_source import to_byte_source
from .core.device import DeviceIdentity, DeviceStorage, InMemoryDeviceStorage
from .repositories.assets_repo import AssetsRepository
from .repositories.storage_repo import ChunkTransport
from .schemas.upload import UploadOptions, UploadResult
from .services.upload_service import UploadOrchestrator
from .utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class UraniumSDK:
    """
    Client for uploading files and minting them as NFTs.

    Usage:
        async with UraniumSDK(api_key="...") as sdk:
            result = await sdk.upload("photo.jpg", UploadOptions(...))
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        device_storage: Optional[DeviceStorage] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        storage_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the SDK.
        Args:
            api_key: API key; overrides the one in settings
            settings: SDK settings, read from the environment when omitted
            device_storage: Persistence for the device ID (in memory by default)
            http_client: Preconfigured client for the Uranium API
            storage_client: Preconfigured client for presigned part uploads
        """
        if settings is None:
            settings = Settings()
        if api_key is not None:
            settings = settings.model_copy(update={"api_key": api_key})
        self.settings = settings

        if settings.debug:
            configure_logging(settings)

        if http_client is None and not settings.api_key:
            raise ValueError(
                "API key is required. Get your API key from: "
                "https://portal.uranium.pro/dashboard/profile/api-keys"
            )

        self._owned_clients = []
        if http_client is None:
            http_client = get_api_client(settings)
            self._owned_clients.append(http_client)
        if storage_client is None:
            storage_client = get_storage_client(settings)
            self._owned_clients.append(storage_client)

        self.http_client = http_client
        self.storage_client = storage_client
        self.device = DeviceIdentity(device_storage or InMemoryDeviceStorage(settings.device_id))

        self.assets = AssetsRepository(http_client, settings)
        self.uploads = UploadOrchestrator(
            assets_repo=self.assets,
            device_id=self.device_id,
            chunk_transport=ChunkTransport(storage_client, settings),
            settings=settings,
        )
        logger.debug("Uranium SDK initialized", base_url=settings.base_url)

    @property
    def device_id(self) -> str:
        return self.device.get_device_id()

    async def upload(
        self, payload: Any, options: UploadOptions, mime_type: Optional[str] = None
    ) -> UploadResult:
        """
        Upload a file and submit it for minting.
        Args:
            payload: bytes, a filesystem path, a binary file object or a ByteSource
            options: Upload options
            mime_type: MIME type override; guessed from the file name otherwise
        Returns:
            Upload result with the file ID and mint status
        """
        source = to_byte_source(payload, mime_type)
        return await self.uploads.upload(source, options)

    async def close(self) -> None:
        """Close the HTTP clients created by the SDK."""
        for client in self._owned_clients:
            await client.aclose()
        self._owned_clients = []

    async def __aenter__(self) -> "UraniumSDK":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
