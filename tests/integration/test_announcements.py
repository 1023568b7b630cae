"""
Integration tests for platform announcements.
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient
from sqlalchemy import select

from eventdekho.core.security import SYSTEM_ADMIN_ID
from eventdekho.db.models import Announcement


async def post_announcement(client, token, **fields):
    body = {"title": "Notice", "content": "Details inside"}
    body.update(fields)
    response = await client.post("/api/announcements", json=body, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
@pytest.mark.asyncio
class TestAnnouncements:

    async def test_create_defaults(self, client: AsyncClient, system_admin_token):
        data = await post_announcement(client, system_admin_token, title="Welcome")

        assert data["category"] == "general"
        assert data["priority"] == "medium"
        assert data["isActive"] is True
        assert data["authorId"] == SYSTEM_ADMIN_ID
        assert data["authorEmail"] == "admin@eventdekho.test"

    async def test_live_list_orders_by_priority(self, client: AsyncClient, system_admin_token):
        await post_announcement(client, system_admin_token, title="Low", priority="low")
        await post_announcement(client, system_admin_token, title="High", priority="high")
        await post_announcement(client, system_admin_token, title="Medium")
        await post_announcement(
            client, system_admin_token, title="Expired", priority="high",
            expiresAt=(datetime.utcnow() - timedelta(hours=1)).isoformat(),
        )

        response = await client.get("/api/announcements")
        assert [a["title"] for a in response.json()] == ["High", "Medium", "Low"]

        response = await client.get("/api/announcements", params={"limit": 1})
        assert [a["title"] for a in response.json()] == ["High"]

        response = await client.get("/api/announcements/admin/all", headers={"Authorization": f"Bearer {system_admin_token}"})
        assert len(response.json()) == 4

    async def test_category_filter(self, client: AsyncClient, system_admin_token):
        await post_announcement(client, system_admin_token, title="New feature", category="feature")
        await post_announcement(client, system_admin_token, title="Deadline", category="deadline")

        response = await client.get("/api/announcements", params={"category": "deadline"})
        assert [a["title"] for a in response.json()] == ["Deadline"]

        response = await client.get("/api/announcements", params={"category": "all"})
        assert len(response.json()) == 2

    async def test_views_and_clicks(self, client: AsyncClient, db_session, system_admin_token):
        a = await post_announcement(client, system_admin_token, link="https://eventdekho.example.com/new")

        assert (await client.get(f"/api/announcements/{a['id']}")).status_code == 200
        response = await client.post(f"/api/announcements/{a['id']}/click")
        assert response.json()["message"] == "Click tracked successfully"

        row = (await db_session.execute(
            select(Announcement.views, Announcement.clicks).where(Announcement.id == a["id"])
        )).one()
        assert tuple(row) == (1, 1)

    async def test_update_and_deactivate(self, client: AsyncClient, system_admin_token):
        headers = {"Authorization": f"Bearer {system_admin_token}"}
        a = await post_announcement(client, system_admin_token)

        response = await client.put(
            f"/api/announcements/{a['id']}",
            json={"title": "Updated notice", "content": ""},
            headers=headers
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Updated notice"
        assert response.json()["content"] == "Details inside"

        await client.put(f"/api/announcements/{a['id']}", json={"isActive": False}, headers=headers)
        assert (await client.get("/api/announcements")).json() == []

    async def test_delete(self, client: AsyncClient, system_admin_token):
        headers = {"Authorization": f"Bearer {system_admin_token}"}
        a = await post_announcement(client, system_admin_token)

        response = await client.delete(f"/api/announcements/{a['id']}", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"/api/announcements/{a['id']}")
        assert response.status_code == 404
        assert response.json()["message"] == "Announcement not found"

    async def test_title_and_content_required(self, client: AsyncClient, system_admin_token):
        response = await client.post(
            "/api/announcements",
            json={"title": "No body"},
            headers={"Authorization": f"Bearer {system_admin_token}"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Title and content are required"

    async def test_admin_only_writes(self, client: AsyncClient, organizer_token):
        response = await client.post(
            "/api/announcements",
            json={"title": "Hi", "content": "There"},
            headers={"Authorization": f"Bearer {organizer_token}"}
        )
        assert response.status_code == 403

        response = await client.get("/api/announcements/admin/all", headers={"Authorization": f"Bearer {organizer_token}"})
        assert response.status_code == 403
