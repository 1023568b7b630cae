"""
Integration tests for media uploads and the health probe.
"""
import pytest
from httpx import AsyncClient


@pytest.mark.integration
@pytest.mark.asyncio
class TestUpload:

    async def test_upload_returns_public_url(self, client: AsyncClient, uploads):
        response = await client.post(
            "/api/upload",
            files={"file": ("poster.PNG", b"\x89PNG fake", "image/png")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["publicId"].startswith("events_media/")
        assert data["url"] == f"https://media.test/{data['publicId']}.png"
        assert uploads == [{"key": f"{data['publicId']}.png", "body": b"\x89PNG fake", "content_type": "image/png"}]

    async def test_no_file(self, client: AsyncClient, uploads):
        response = await client.post("/api/upload")
        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"

    async def test_unsupported_type(self, client: AsyncClient, uploads):
        response = await client.post(
            "/api/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Unsupported file type")
        assert uploads == []

    async def test_storage_not_configured(self, client: AsyncClient):
        response = await client.post(
            "/api/upload",
            files={"file": ("clip.mp4", b"video", "video/mp4")}
        )
        assert response.status_code == 500
        assert response.json()["message"] == "Upload failed"


@pytest.mark.integration
@pytest.mark.asyncio
class TestHealth:

    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "env": "backend"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"
