"""Upload service: drives one file from validation to mint submission."""

import asyncio
import json
import math
from typing import Callable, List, Optional
from ..config.settings import Settings
from ..core.byte_source import ByteSource
from ..core.cancellation import CancellationToken, ensure_token
from ..core.exceptions import UraniumError, to_upload_error
from ..repositories.assets_repo import AssetsRepository
from ..repositories.storage_repo import ChunkTransport
from ..schemas.assets import MetadataAttribute, PrepareNewFileResponse
from ..schemas.upload import (
    Chunk,
    ChunkUploadResult,
    UploadMetadata,
    UploadOptions,
    UploadResult,
)
from ..utils.constants import (
    MINT_SUBMIT_PERCENT,
    ClientUploadStage,
    FileSource,
    FileType,
    MetadataAttributeType,
)
from ..utils.helpers import detect_file_type, format_file_size, normalize_mime_type
from ..utils.logger import get_logger
from ..utils.validators import (
    validate_asset_description,
    validate_asset_location,
    validate_asset_title,
    validate_contract_id,
    validate_editions,
)
from .progress_service import ProgressCounters, stage_fraction_at, to_progress

logger = get_logger(__name__)

Emit = Callable[[ClientUploadStage, ProgressCounters, str], None]


class UploadOrchestrator:
    """
    Orchestrates the upload flow from validation to NFT mint submission.

    Stages run strictly in order:
    1. VALIDATING (0-5%): file size, MIME category and upload options
    2. PREPARING (5-12%): prepare call returns the upload slot and presigned URLs
    3. PROCESSING (12-18%): payload is split into chunks
    4. UPLOADING (18-75%): chunks are sent one after another
    5. FINALIZING (75-85%): complete call with every part's ETag
    6. REQUESTING_MINT (85-99%): start-mint call with the metadata attributes
    7. DONE (100%)

    Each ``upload`` call owns its chunk and result lists, so concurrent uploads
    through one orchestrator do not share state.
    """

    def __init__(
        self,
        assets_repo: AssetsRepository,
        device_id: str,
        chunk_transport: ChunkTransport,
        settings: Optional[Settings] = None,
    ):
        if settings is None:
            from ..config.settings import settings
        self.assets_repo = assets_repo
        self.device_id = device_id
        self.chunk_transport = chunk_transport
        self.settings = settings

    async def upload(self, source: ByteSource, options: UploadOptions) -> UploadResult:
        """
        Upload a file and submit it for NFT minting.
        Args:
            source: Payload to upload
            options: Collection, metadata, flags, progress callback and cancel token
        Returns:
            Partial asset descriptor; minting itself completes asynchronously on the backend
        Raises:
            UraniumError: tagged with the failure kind
        """
        cancel_token = ensure_token(options.cancel_token)
        callback = options.on_progress

        def emit(stage: ClientUploadStage, counters: ProgressCounters, status: str) -> None:
            if callback is not None:
                callback(to_progress(stage, counters, status))

        try:
            return await self._run(source, options, cancel_token, emit)
        except Exception as e:
            error = to_upload_error(e, cancel_token)
            logger.warning(
                "Upload failed",
                kind=error.kind.value,
                code=error.code,
                error=error.message,
            )
            if error is e:
                raise
            raise error from e

    async def _run(
        self,
        source: ByteSource,
        options: UploadOptions,
        cancel_token: Optional[CancellationToken],
        emit: Emit,
    ) -> UploadResult:
        # VALIDATING
        emit(ClientUploadStage.VALIDATING, ProgressCounters(), "Validating file...")

        file_size = source.length()
        self._validate_file_size(file_size)
        self._validate_options(options)

        # The complete call only accepts a bare type/subtype
        mime_type = normalize_mime_type(source.mime_type())
        file_type = detect_file_type(mime_type)
        if file_type == FileType.UNKNOWN:
            raise UraniumError.validation(
                "Unsupported file type. Please upload an image or video file.",
                "INVALID_FILE_TYPE",
                mime_type=source.mime_type(),
            )

        emit(ClientUploadStage.VALIDATING, ProgressCounters(stage_fraction=1.0), "Validation complete")
        self._check_cancelled(cancel_token)

        # PREPARING
        log = logger.bind(file_size=file_size, mime_type=mime_type)
        log.info("Preparing upload", size=format_file_size(file_size))
        emit(ClientUploadStage.PREPARING, ProgressCounters(), "Preparing upload...")

        slot = await self.assets_repo.prepare_new_file(
            {
                "device_id": self.device_id,
                "metadata": self._serialize_metadata(options.metadata),
                "type": file_type,
                "source": FileSource.UPLOAD,
                "file_size": file_size,
                "is_private": options.is_private,
            }
        )
        self._check_upload_slot(slot, file_size)

        file_id = slot.file_id
        total = slot.chunk_count
        log = log.bind(file_id=file_id, total_chunks=total)
        emit(
            ClientUploadStage.PREPARING,
            ProgressCounters(total_chunks=total, stage_fraction=1.0),
            "Upload prepared",
        )
        self._check_cancelled(cancel_token)

        # PROCESSING
        emit(ClientUploadStage.PROCESSING, ProgressCounters(total_chunks=total), "Processing file...")
        chunks = await asyncio.to_thread(self._build_chunks, source, slot, file_size)
        emit(
            ClientUploadStage.PROCESSING,
            ProgressCounters(total_chunks=total, stage_fraction=1.0),
            "File processed",
        )
        self._check_cancelled(cancel_token)

        # UPLOADING
        log.info("Uploading chunks")
        results = await self._upload_chunks(chunks, cancel_token, emit)
        self._check_cancelled(cancel_token)

        # FINALIZING
        done = ProgressCounters(uploaded_chunks=total, total_chunks=total, current_chunk=total)
        log.info("Finalizing upload")
        emit(ClientUploadStage.FINALIZING, done, "Finalizing upload...")
        await self.assets_repo.complete_upload(
            {
                "file_id": file_id,
                "mime_type": mime_type,
                "chunks": [result.model_dump() for result in results],
                "disable_thumbnail": options.disable_thumbnail,
            }
        )
        emit(
            ClientUploadStage.FINALIZING,
            done.model_copy(update={"stage_fraction": 1.0}),
            "Upload finalized",
        )
        self._check_cancelled(cancel_token)

        # REQUESTING_MINT
        emit(ClientUploadStage.REQUESTING_MINT, done, "Preparing mint request...")
        attributes = self._build_attributes(options.metadata)
        submit_fraction = stage_fraction_at(ClientUploadStage.REQUESTING_MINT, MINT_SUBMIT_PERCENT)
        emit(
            ClientUploadStage.REQUESTING_MINT,
            done.model_copy(update={"stage_fraction": submit_fraction}),
            "Submitting to mint queue...",
        )
        minting = await self.assets_repo.start_minting(
            {
                "file_id": file_id,
                "editions": options.editions,
                "contract_id": options.contract_id,
                "share_with_community": options.share_with_community,
                "metadata": {"attributes": [a.model_dump() for a in attributes]},
            }
        )
        emit(
            ClientUploadStage.REQUESTING_MINT,
            done.model_copy(update={"stage_fraction": 1.0}),
            "Mint request submitted",
        )

        # DONE
        emit(ClientUploadStage.DONE, done, "Complete!")
        log.info("Upload submitted to mint queue", status=minting.status)

        return UploadResult(
            file_id=file_id,
            status=minting.status,
            contract_address=minting.contract_address or None,
            token_id=minting.token_id or None,
            mint_progress_info=minting.mint_progress_info,
            chunks=results,
        )

    async def _upload_chunks(
        self,
        chunks: List[Chunk],
        cancel_token: Optional[CancellationToken],
        emit: Emit,
    ) -> List[ChunkUploadResult]:
        """Upload chunks sequentially; results stay in part-number order."""
        total = len(chunks)
        uploaded = 0
        results: List[ChunkUploadResult] = []

        for chunk in chunks:
            self._check_cancelled(cancel_token)
            peak = 0.0

            def on_chunk_progress(fraction: float, chunk: Chunk = chunk) -> None:
                # A retried attempt restarts at 0; never report going backwards
                nonlocal peak
                peak = max(peak, min(1.0, max(0.0, fraction)))
                emit(
                    ClientUploadStage.UPLOADING,
                    ProgressCounters(
                        uploaded_chunks=uploaded,
                        total_chunks=total,
                        current_chunk=chunk.part_number,
                        chunk_fraction=peak,
                    ),
                    f"Uploading chunk {chunk.part_number} of {total}...",
                )

            e_tag = await self.chunk_transport.send(
                chunk.url,
                chunk.data,
                on_progress=on_chunk_progress,
                cancel_token=cancel_token,
            )

            uploaded += 1
            results.append(ChunkUploadResult(part_number=chunk.part_number, e_tag=e_tag))
            logger.debug("Chunk uploaded", part_number=chunk.part_number, total_chunks=total)
            emit(
                ClientUploadStage.UPLOADING,
                ProgressCounters(
                    uploaded_chunks=uploaded,
                    total_chunks=total,
                    current_chunk=chunk.part_number,
                ),
                f"Uploaded chunk {uploaded} of {total}",
            )

        return results

    def _validate_file_size(self, size: int) -> None:
        if size <= 0:
            raise UraniumError.validation("File size must be greater than 0", "INVALID_FILE_SIZE", size=size)
        if size > self.settings.max_file_size_bytes:
            raise UraniumError.validation(
                f"File size exceeds maximum allowed size of {self.settings.max_file_size_mb:.2f} MB",
                "FILE_TOO_LARGE",
                size=size,
            )

    @staticmethod
    def _validate_options(options: UploadOptions) -> None:
        checks = (
            ("title", validate_asset_title, options.metadata.title),
            ("description", validate_asset_description, options.metadata.description),
            ("location", validate_asset_location, options.metadata.location),
            ("editions", validate_editions, options.editions),
            ("contract_id", validate_contract_id, options.contract_id),
        )
        for field, validator, value in checks:
            try:
                validator(value)
            except ValueError as e:
                raise UraniumError.validation(str(e), "VALIDATION_ERROR", field=field) from e

    @staticmethod
    def _serialize_metadata(metadata: UploadMetadata) -> str:
        return json.dumps(
            {
                "title": metadata.title,
                "description": metadata.description or None,
                "location": metadata.location or None,
            }
        )

    @staticmethod
    def _check_upload_slot(slot: PrepareNewFileResponse, file_size: int) -> None:
        """Reject slots whose part list cannot cover the payload."""
        problem = None
        part_numbers = sorted(part.part_number for part in slot.upload_part_urls)
        if slot.chunk_count <= 0 or slot.chunk_size <= 0:
            problem = "chunk count and chunk size must be positive"
        elif slot.chunk_count != math.ceil(file_size / slot.chunk_size):
            problem = "chunk count does not match file size"
        elif part_numbers != list(range(1, slot.chunk_count + 1)):
            problem = "part numbers must be contiguous from 1"

        if problem:
            raise UraniumError.upstream(
                f"Invalid upload slot: {problem}",
                code="INVALID_UPLOAD_SLOT",
                file_id=slot.file_id,
                chunk_count=slot.chunk_count,
                chunk_size=slot.chunk_size,
                parts=len(slot.upload_part_urls),
            )

    @staticmethod
    def _build_chunks(
        source: ByteSource, slot: PrepareNewFileResponse, file_size: int
    ) -> List[Chunk]:
        chunks = []
        for part in sorted(slot.upload_part_urls, key=lambda p: p.part_number):
            start = (part.part_number - 1) * slot.chunk_size
            end = min(start + slot.chunk_size, file_size)
            chunks.append(
                Chunk(
                    part_number=part.part_number,
                    url=part.url,
                    start=start,
                    end=end,
                    data=source.read_range(start, end),
                )
            )
        return chunks

    def _build_attributes(self, metadata: UploadMetadata) -> List[MetadataAttribute]:
        attributes = [
            MetadataAttribute(key="title", value=metadata.title, type=MetadataAttributeType.STRING),
            MetadataAttribute(key="appName", value=self.settings.app_name, type=MetadataAttributeType.STRING),
            MetadataAttribute(key="appVersion", value=self.settings.app_version, type=MetadataAttributeType.STRING),
        ]
        if metadata.description:
            attributes.append(
                MetadataAttribute(key="description", value=metadata.description, type=MetadataAttributeType.STRING)
            )
        if metadata.location:
            attributes.append(
                MetadataAttribute(key="location", value=metadata.location, type=MetadataAttributeType.STRING)
            )
        return attributes

    @staticmethod
    def _check_cancelled(cancel_token: Optional[CancellationToken]) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            logger.info("Upload cancellation observed")
            raise UraniumError.cancelled()
