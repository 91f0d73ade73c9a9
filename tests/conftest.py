"""Pytest configuration and fixtures."""

import asyncio
import math
from typing import Any, AsyncGenerator, Dict, List, Set
import pytest
from fastapi import FastAPI, Request, Response
from httpx import AsyncClient, ASGITransport

from uranium_sdk import UraniumSDK
from uranium_sdk.config.settings import Settings
from uranium_sdk.core.device import InMemoryDeviceStorage


API_BASE_URL = "http://api.test"
STORAGE_BASE_URL = "http://storage.test"
TEST_API_KEY = "test-api-key"
TEST_DEVICE_ID = "sdk-test-device"


class FakeUraniumBackend:
    """
    In-process stand-in for the Uranium API and presigned storage.
    Tests tweak the attributes to inject failures.
    """

    def __init__(self, chunk_size: int = 1024):
        self.chunk_size = chunk_size
        self.file_id = "file-123"
        self.mint_status = "MEDIA_UPLOAD_INITIALIZING"

        # partNumber -> number of 500 responses before succeeding
        self.put_failures: Dict[int, int] = {}
        self.missing_etag_parts: Set[int] = set()
        self.hang_parts: Set[int] = set()
        self.prepare_override: Dict[str, Any] = {}
        self.complete_status = "ok"

        self.calls: List[str] = []
        self.headers: List[Dict[str, str]] = []
        self.prepare_bodies: List[Dict[str, Any]] = []
        self.complete_bodies: List[Dict[str, Any]] = []
        self.mint_bodies: List[Dict[str, Any]] = []
        self.put_attempts: Dict[int, int] = {}
        self.parts: Dict[int, bytes] = {}

        self.app = self._build_app()

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.post("/assets/prepare-new-file")
        async def prepare_new_file(request: Request):
            body = await request.json()
            self.calls.append("prepare")
            self.headers.append(dict(request.headers))
            self.prepare_bodies.append(body)

            chunk_count = math.ceil(body["fileSize"] / self.chunk_size)
            response = {
                "status": "ok",
                "fileId": self.file_id,
                "fileUploadId": "upload-1",
                "chunkCount": chunk_count,
                "chunkSize": self.chunk_size,
                "uploadPartUrls": [
                    {"partNumber": n, "url": f"{STORAGE_BASE_URL}/upload/{self.file_id}/{n}"}
                    for n in range(1, chunk_count + 1)
                ],
            }
            response.update(self.prepare_override)
            return response

        @app.put("/upload/{file_id}/{part_number}")
        async def upload_part(file_id: str, part_number: int, request: Request):
            self.calls.append(f"put:{part_number}")
            self.put_attempts[part_number] = self.put_attempts.get(part_number, 0) + 1
            body = await request.body()

            if part_number in self.hang_parts:
                await asyncio.sleep(3600)

            if self.put_failures.get(part_number, 0) > 0:
                self.put_failures[part_number] -= 1
                return Response(status_code=500)

            self.parts[part_number] = body
            if part_number in self.missing_etag_parts:
                return Response(status_code=200)
            return Response(status_code=200, headers={"ETag": f'"etag-{part_number}"'})

        @app.post("/assets/complete-upload")
        async def complete_upload(request: Request):
            self.calls.append("complete")
            self.complete_bodies.append(await request.json())
            return {"status": self.complete_status}

        @app.post("/assets/start-minting")
        async def start_minting(request: Request):
            self.calls.append("mint")
            self.mint_bodies.append(await request.json())
            return {
                "status": "ok",
                "data": {
                    "status": self.mint_status,
                    "mintProgressInfo": {"totalChunks": 0, "completedChunks": 0},
                },
            }

        return app


@pytest.fixture
def backend() -> FakeUraniumBackend:
    """Fake backend with 1 KiB chunks."""
    return FakeUraniumBackend()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with instant retries and small progress slices."""
    return Settings(
        api_key=TEST_API_KEY,
        base_url=API_BASE_URL,
        app_name="uranium-tests",
        app_version="9.9.9",
        chunk_retry_base_delay=0.0,
        chunk_progress_slice_bytes=256,
        max_file_size_mb=1,
    )


@pytest.fixture
async def api_client(backend: FakeUraniumBackend) -> AsyncGenerator[AsyncClient, None]:
    """API client routed to the fake backend."""
    transport = ASGITransport(app=backend.app)
    async with AsyncClient(
        transport=transport,
        base_url=API_BASE_URL,
        headers={"Content-Type": "application/json", "x-auth-token": TEST_API_KEY},
    ) as ac:
        yield ac


@pytest.fixture
async def storage_client(backend: FakeUraniumBackend) -> AsyncGenerator[AsyncClient, None]:
    """Storage client routed to the fake backend."""
    transport = ASGITransport(app=backend.app)
    async with AsyncClient(transport=transport) as ac:
        yield ac


@pytest.fixture
async def sdk(
    test_settings: Settings, api_client: AsyncClient, storage_client: AsyncClient
) -> AsyncGenerator[UraniumSDK, None]:
    """SDK wired to the fake backend."""
    async with UraniumSDK(
        settings=test_settings,
        device_storage=InMemoryDeviceStorage(TEST_DEVICE_ID),
        http_client=api_client,
        storage_client=storage_client,
    ) as client:
        yield client


@pytest.fixture
def progress_events() -> List[Any]:
    """List collecting progress records."""
    return []
