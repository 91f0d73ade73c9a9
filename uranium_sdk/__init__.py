"""Uranium SDK: chunked file upload and NFT minting."""

from .client import UraniumSDK
from .config.settings import SDK_VERSION, Settings
from .core.byte_source import ByteSource, BytesSource, PathByteSource
from .core.cancellation import CancellationToken
from .core.device import DeviceIdentity, FileDeviceStorage, InMemoryDeviceStorage
from .core.exceptions import ErrorKind, UraniumError
from .schemas.upload import UploadMetadata, UploadOptions, UploadProgress, UploadResult
from .utils.constants import ClientUploadStage, UploadStatus
from .utils.helpers import is_asset_minted

__version__ = SDK_VERSION

__all__ = [
    "UraniumSDK",
    "Settings",
    "ByteSource",
    "BytesSource",
    "PathByteSource",
    "CancellationToken",
    "DeviceIdentity",
    "FileDeviceStorage",
    "InMemoryDeviceStorage",
    "ErrorKind",
    "UraniumError",
    "UploadMetadata",
    "UploadOptions",
    "UploadProgress",
    "UploadResult",
    "ClientUploadStage",
    "UploadStatus",
    "is_asset_minted",
    "__version__",
]
