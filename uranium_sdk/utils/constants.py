"""SDK constants and enums."""

from enum import Enum, IntEnum


class ClientUploadStage(str, Enum):
    """Client-side upload stage, in execution order."""

    VALIDATING = "VALIDATING"
    PREPARING = "PREPARING"
    PROCESSING = "PROCESSING"
    UPLOADING = "UPLOADING"
    FINALIZING = "FINALIZING"
    REQUESTING_MINT = "REQUESTING_MINT"
    DONE = "DONE"


class FileType(str, Enum):
    """Content category of an uploaded asset."""

    IMAGE = "image"
    VIDEO = "video"
    GIF = "gif"
    UNKNOWN = "unknown"


class FileSource(str, Enum):
    """Where the file originated."""

    CAMERA = "camera"
    GALLERY = "gallery"
    UPLOAD = "upload"


class MetadataAttributeType(IntEnum):
    """Data type of an NFT metadata attribute."""

    STRING = 0
    NUMBER = 1
    BOOLEAN = 2
    UNRECOGNIZED = -1


class UploadStatus(str, Enum):
    """Backend mint status reported by the start-mint call."""

    MEDIA_UPLOAD_INITIALIZING = "MEDIA_UPLOAD_INITIALIZING"
    MEDIA_UPLOADING = "MEDIA_UPLOADING"
    MEDIA_VERIFYING = "MEDIA_VERIFYING"
    MEDIA_CONFIRMING = "MEDIA_CONFIRMING"
    MEDIA_CONFIRMED = "MEDIA_CONFIRMED"
    META_UPLOAD_INITIALIZING = "META_UPLOAD_INITIALIZING"
    META_UPLOADING = "META_UPLOADING"
    META_VERIFYING = "META_VERIFYING"
    META_CONFIRMING = "META_CONFIRMING"
    META_CONFIRMED = "META_CONFIRMED"
    NFT_INITIALIZING = "NFT_INITIALIZING"
    NFT_SIGNING = "NFT_SIGNING"
    NFT_MINTING = "NFT_MINTING"
    NFT_CONFIRMED = "NFT_CONFIRMED"
    NFT_ALL_BLOCK_CONFIRMED = "NFT_ALL_BLOCK_CONFIRMED"


# Percent sub-range owned by each stage (inclusive bounds)
STAGE_PERCENT_RANGES = {
    ClientUploadStage.VALIDATING: (0, 5),
    ClientUploadStage.PREPARING: (5, 12),
    ClientUploadStage.PROCESSING: (12, 18),
    ClientUploadStage.UPLOADING: (18, 75),
    ClientUploadStage.FINALIZING: (75, 85),
    ClientUploadStage.REQUESTING_MINT: (85, 99),
    ClientUploadStage.DONE: (100, 100),
}

# Checkpoint inside REQUESTING_MINT once the attribute list is built
MINT_SUBMIT_PERCENT = 90

CLIENT_UPLOAD_STAGE_TEXT = {
    ClientUploadStage.VALIDATING: "Validating file...",
    ClientUploadStage.PREPARING: "Preparing upload...",
    ClientUploadStage.PROCESSING: "Processing file...",
    ClientUploadStage.UPLOADING: "Uploading...",
    ClientUploadStage.FINALIZING: "Finalizing upload...",
    ClientUploadStage.REQUESTING_MINT: "Requesting mint...",
    ClientUploadStage.DONE: "Complete!",
}

UPLOAD_STATUS_TEXT = {
    UploadStatus.MEDIA_UPLOAD_INITIALIZING: "Initializing permanentizer...",
    UploadStatus.MEDIA_UPLOADING: "Uploading media...",
    UploadStatus.MEDIA_VERIFYING: "Verifying upload...",
    UploadStatus.MEDIA_CONFIRMING: "Confirming...",
    UploadStatus.MEDIA_CONFIRMED: "Irreversible upload finalized.",
    UploadStatus.META_UPLOAD_INITIALIZING: "Initializing permanentizer...",
    UploadStatus.META_UPLOADING: "Uploading metadata...",
    UploadStatus.META_VERIFYING: "Verifying upload...",
    UploadStatus.META_CONFIRMING: "Confirming...",
    UploadStatus.META_CONFIRMED: "Irreversible upload finalized.",
    UploadStatus.NFT_INITIALIZING: "Mapping smart-contract methods...",
    UploadStatus.NFT_SIGNING: "Signing Transaction...",
    UploadStatus.NFT_MINTING: "Minting NFT...",
    UploadStatus.NFT_CONFIRMED: "NFT minted.",
    UploadStatus.NFT_ALL_BLOCK_CONFIRMED: "All blocks confirmed.",
}

MINTED_STATUSES = frozenset(
    {UploadStatus.NFT_CONFIRMED, UploadStatus.NFT_ALL_BLOCK_CONFIRMED}
)

BINARY_CONTENT_TYPE = "application/octet-stream"

# Bare type/subtype accepted by the complete call
MIME_TYPE_PATTERN = r"^[\w-]+/[\w\-+.]+$"
