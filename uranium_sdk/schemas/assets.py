"""Request and response schemas for the asset upload and minting API."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from ..utils.constants import MIME_TYPE_PATTERN, FileSource, FileType, MetadataAttributeType


class ApiModel(BaseModel):
    """Base schema using camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class BaseApiResponse(ApiModel):
    """Status envelope shared by every API response."""

    status: Optional[str] = Field(None, description="Response status, usually 'ok' or 'error'")
    error_code: Optional[str] = Field(None, description="Error code when status is 'error'")


class PrepareNewFileRequest(ApiModel):
    """Request to prepare a multipart upload."""

    device_id: str = Field(..., min_length=1, description="Device identifier")
    metadata: str = Field(..., min_length=1, description="JSON-serialized asset metadata")
    type: FileType = Field(..., description="Content category of the file")
    source: FileSource = Field(FileSource.UPLOAD, description="Where the file originated")
    file_size: int = Field(..., gt=0, description="Total file size in bytes")
    is_private: Optional[bool] = Field(None, description="Keep the asset out of public listings")


class UploadPartUrl(ApiModel):
    """Presigned URL for a single part."""

    part_number: int = Field(..., ge=1, description="Part number (1-indexed)")
    url: str = Field(..., description="Presigned URL for uploading this part")


class PrepareNewFileResponse(BaseApiResponse):
    """Upload slot issued by the server."""

    file_id: Optional[str] = Field(None, description="Unique file identifier")
    file_upload_id: Optional[str] = Field(None, description="Upload session identifier")
    chunk_count: int = Field(0, ge=0, description="Number of parts the server expects")
    chunk_size: int = Field(0, ge=0, description="Size of each part in bytes")
    upload_part_urls: List[UploadPartUrl] = Field(default_factory=list)


class CompleteUploadChunk(ApiModel):
    """Information about an uploaded part."""

    part_number: int = Field(..., ge=1, description="Part number (1-indexed)")
    e_tag: str = Field(..., min_length=1, description="ETag returned by storage for the part")


class CompleteUploadRequest(ApiModel):
    """Request to complete a multipart upload."""

    file_id: str = Field(..., min_length=1)
    mime_type: str = Field(..., pattern=MIME_TYPE_PATTERN)
    chunks: List[CompleteUploadChunk] = Field(..., min_length=1)
    disable_thumbnail: Optional[bool] = None


class CompleteUploadResponse(BaseApiResponse):
    """Response for completing an upload."""


class MetadataAttribute(ApiModel):
    """NFT metadata attribute."""

    key: str = Field(..., min_length=1)
    value: str
    type: MetadataAttributeType = MetadataAttributeType.STRING


class Metadata(ApiModel):
    """NFT metadata."""

    attributes: List[MetadataAttribute] = Field(default_factory=list)


class StartMintingRequest(ApiModel):
    """Request to submit an uploaded file to the mint queue."""

    file_id: str = Field(..., min_length=1)
    editions: Optional[int] = Field(None, ge=1, le=1000)
    contract_id: Optional[str] = Field(None, min_length=1)
    share_with_community: Optional[bool] = None
    metadata: Metadata


class MintProgressInfo(ApiModel):
    """Mint progress counters reported by the backend."""

    total_chunks: Optional[int] = None
    completed_chunks: Optional[int] = None


class StartMintingResponseData(ApiModel):
    """Mint submission result."""

    status: str
    mint_progress_info: Optional[MintProgressInfo] = None
    contract_address: Optional[str] = None
    token_id: Optional[str] = None


class StartMintingResponse(BaseApiResponse):
    """Response for starting the minting process."""

    data: Optional[StartMintingResponseData] = None
