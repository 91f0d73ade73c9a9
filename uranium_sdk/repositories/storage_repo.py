"""Storage repository: chunk PUTs to presigned URLs."""

import asyncio
from typing import AsyncIterator, Callable, Optional
import httpx
from ..config.settings import Settings
from ..core.cancellation import CancellationToken, cancellable_sleep
from ..core.exceptions import UraniumError
from ..utils.constants import BINARY_CONTENT_TYPE
from ..utils.helpers import extract_etag_from_headers
from ..utils.logger import get_logger

logger = get_logger(__name__)

ChunkProgressCallback = Callable[[float], None]


class MissingEtagError(Exception):
    """Storage accepted the part but returned no ETag."""


class ChunkTransport:
    """
    Uploads single chunks with bounded retry and exponential backoff.

    Each ``send`` makes up to ``max_attempts`` PUTs, waiting
    ``base_delay * 2**attempt`` seconds between them. Cancellation is checked
    before every attempt, races the in-flight PUT and cuts backoff waits short.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        """
        Initialize transport.
        Args:
            client: HTTP client without API headers
            settings: SDK settings (attempts, backoff, progress granularity)
        """
        self.client = client
        self.max_attempts = settings.chunk_max_attempts
        self.base_delay = settings.chunk_retry_base_delay
        self.slice_size = settings.chunk_progress_slice_bytes

    async def send(
        self,
        url: str,
        data: bytes,
        on_progress: Optional[ChunkProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Upload one chunk.
        Args:
            url: Presigned URL for the part
            data: Chunk bytes
            on_progress: Called with loaded/total (0-1) while the body is sent
            cancel_token: Cancellation token for the whole upload
        Returns:
            Normalized ETag of the uploaded part
        """
        last_error: Optional[BaseException] = None

        for attempt in range(self.max_attempts):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(
                    "Upload aborted by user", "UPLOAD_ABORTED", url=url, attempt=attempt
                )

            try:
                response = await self._put_cancellable(url, data, on_progress, cancel_token)
                etag = extract_etag_from_headers(response.headers)
                if not etag:
                    raise MissingEtagError("Failed to extract ETag from response")
                return etag
            except (httpx.HTTPError, MissingEtagError) as e:
                last_error = e

            if attempt == self.max_attempts - 1:
                break

            delay = self.base_delay * 2 ** attempt
            logger.warning(
                "Chunk upload failed, retrying",
                attempt=attempt + 1,
                max_attempts=self.max_attempts,
                delay=delay,
                error=str(last_error),
            )
            await cancellable_sleep(delay, cancel_token)

        code = "ETAG_MISSING" if isinstance(last_error, MissingEtagError) else "UPLOAD_FAILED"
        logger.error(
            "Chunk upload failed after maximum retries",
            attempts=self.max_attempts,
            code=code,
            error=str(last_error),
        )
        raise UraniumError.retries_exhausted(
            "Failed to upload chunk after maximum retries",
            code,
            url=url,
            retry_attempts=self.max_attempts,
            original_error=str(last_error),
        ) from last_error

    async def _put_cancellable(
        self,
        url: str,
        data: bytes,
        on_progress: Optional[ChunkProgressCallback],
        cancel_token: Optional[CancellationToken],
    ) -> httpx.Response:
        """Run the PUT, aborting it as soon as the token is cancelled."""
        if cancel_token is None:
            return await self._put(url, data, on_progress)

        put_task = asyncio.ensure_future(self._put(url, data, on_progress))
        cancel_task = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({put_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (put_task, cancel_task):
                if not task.done():
                    task.cancel()

        if put_task.done() and not put_task.cancelled():
            return put_task.result()

        # Let the aborted request unwind before reporting
        await asyncio.gather(put_task, return_exceptions=True)
        logger.info("Chunk upload aborted", url=url)
        raise UraniumError.cancelled("Upload aborted by user", "UPLOAD_ABORTED", url=url)

    async def _put(
        self, url: str, data: bytes, on_progress: Optional[ChunkProgressCallback]
    ) -> httpx.Response:
        total = len(data)
        response = await self.client.put(
            url,
            content=self._stream(data, on_progress),
            headers={
                "Content-Type": BINARY_CONTENT_TYPE,
                "Content-Length": str(total),
            },
        )
        response.raise_for_status()
        return response

    async def _stream(
        self, data: bytes, on_progress: Optional[ChunkProgressCallback]
    ) -> AsyncIterator[bytes]:
        """Yield the body in slices, reporting loaded/total after each one."""
        total = len(data)
        view = memoryview(data)
        loaded = 0
        while loaded < total:
            piece = bytes(view[loaded:loaded + self.slice_size])
            yield piece
            loaded += len(piece)
            if on_progress and total:
                on_progress(loaded / total)

