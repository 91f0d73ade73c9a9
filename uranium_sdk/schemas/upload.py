"""Upload orchestration schemas."""

import asyncio
from typing import Callable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from ..core.cancellation import CancellationToken
from ..utils.constants import ClientUploadStage
from ..utils.helpers import is_asset_minted
from .assets import MintProgressInfo


class UploadMetadata(BaseModel):
    """
    Descriptive metadata attached to the minted asset.
    Length limits are enforced when the upload is validated.
    """

    title: str
    description: Optional[str] = None
    location: Optional[str] = None


class UploadProgress(BaseModel):
    """Progress record emitted to the caller's callback."""

    model_config = ConfigDict(frozen=True)

    stage: ClientUploadStage
    percent: int = Field(..., ge=0, le=100, description="Overall completion percentage")
    uploaded_chunks: int = 0
    total_chunks: int = 0
    current_chunk: int = Field(0, description="Chunk being processed (1-based)")
    current_status: str = ""
    chunk_progress: Optional[int] = Field(
        None, ge=0, le=100, description="Progress of the current chunk, only while uploading"
    )


ProgressCallback = Callable[[UploadProgress], None]


class UploadOptions(BaseModel):
    """Configuration for a single upload."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    contract_id: str = Field(..., description="Collection to mint the asset in")
    metadata: UploadMetadata
    editions: Optional[int] = Field(1, description="Editions to mint (ERC1155 only)")
    share_with_community: bool = False
    disable_thumbnail: bool = False
    is_private: bool = False
    on_progress: Optional[ProgressCallback] = None
    cancel_token: Optional[Union[CancellationToken, asyncio.Event]] = None


class Chunk(BaseModel):
    """Byte range of the payload bound to one presigned URL."""

    model_config = ConfigDict(frozen=True)

    part_number: int
    url: str
    start: int
    end: int
    data: bytes

    @property
    def size(self) -> int:
        return self.end - self.start


class ChunkUploadResult(BaseModel):
    """Part number and ETag of a successfully uploaded chunk."""

    part_number: int
    e_tag: str


class UploadResult(BaseModel):
    """Descriptor returned once the asset is submitted to the mint queue."""

    file_id: str
    status: str
    contract_address: Optional[str] = None
    token_id: Optional[str] = None
    mint_progress_info: Optional[MintProgressInfo] = None
    chunks: List[ChunkUploadResult] = Field(default_factory=list)

    @property
    def is_minted(self) -> bool:
        return is_asset_minted(self.status)
