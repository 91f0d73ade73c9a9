"""Assets repository for the upload and minting API."""

from pydantic import BaseModel, ValidationError
from typing import Any, Dict, Type
from .base import BaseApiRepository
from ..core.exceptions import UraniumError
from ..schemas.assets import (
    CompleteUploadRequest,
    CompleteUploadResponse,
    PrepareNewFileRequest,
    PrepareNewFileResponse,
    StartMintingRequest,
    StartMintingResponse,
    StartMintingResponseData,
)


class AssetsRepository(BaseApiRepository):
    """Repository for asset upload and minting operations."""

    PREPARE_PATH = "/assets/prepare-new-file"
    COMPLETE_PATH = "/assets/complete-upload"
    START_MINTING_PATH = "/assets/start-minting"

    async def prepare_new_file(self, params: Dict[str, Any]) -> PrepareNewFileResponse:
        """
        Prepare a multipart upload.
        Args:
            params: deviceId, metadata, type, source, fileSize, isPrivate
        Returns:
            Upload slot with presigned part URLs
        """
        request = _build(PrepareNewFileRequest, params, "Invalid file preparation parameters")
        response = await self._post(self.PREPARE_PATH, request, PrepareNewFileResponse)

        if not response.file_id:
            raise UraniumError.upstream(
                "Failed to prepare file upload",
                path=self.PREPARE_PATH,
                data=response.model_dump(by_alias=True),
            )
        return response

    async def complete_upload(self, params: Dict[str, Any]) -> CompleteUploadResponse:
        """
        Complete a multipart upload.
        Args:
            params: fileId, mimeType, chunks (partNumber + eTag), disableThumbnail
        Returns:
            Completion confirmation
        """
        request = _build(CompleteUploadRequest, params, "Invalid upload completion parameters")
        response = await self._post(self.COMPLETE_PATH, request, CompleteUploadResponse)

        if response.status != "ok":
            raise UraniumError.upstream(
                "Failed to complete upload",
                path=self.COMPLETE_PATH,
                data=response.model_dump(by_alias=True),
            )
        return response

    async def start_minting(self, params: Dict[str, Any]) -> StartMintingResponseData:
        """
        Submit an uploaded file to the mint queue.
        Args:
            params: fileId, editions, contractId, shareWithCommunity, metadata
        Returns:
            Mint status, and contract address / token ID when already known
        """
        request = _build(StartMintingRequest, params, "Invalid minting parameters")
        response = await self._post(self.START_MINTING_PATH, request, StartMintingResponse)

        if response.data is None:
            raise UraniumError.upstream(
                "Failed to start minting process",
                path=self.START_MINTING_PATH,
                data=response.model_dump(by_alias=True),
            )
        return response.data


def _build(model: Type[BaseModel], params: Dict[str, Any], message: str) -> BaseModel:
    """Validate request parameters before anything is sent."""
    try:
        return model.model_validate(params)
    except ValidationError as e:
        raise UraniumError.validation(
            message, "INVALID_INPUT", errors=e.errors(include_url=False)
        ) from e
