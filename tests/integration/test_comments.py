"""
Integration tests for comment endpoints.
"""
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from eventdekho.db.models import Comment, Event


async def comment_count(db_session, event_id):
    return (await db_session.execute(select(Event.comments).where(Event.id == event_id))).scalar()


@pytest.mark.integration
@pytest.mark.asyncio
class TestComments:

    async def test_create_and_delete_keep_counter_in_step(self, client: AsyncClient, db_session, user_token, test_event):
        headers = {"Authorization": f"Bearer {user_token}"}

        response = await client.post(
            "/api/comments",
            json={"text": "  Can't wait!  ", "eventId": test_event.id},
            headers=headers
        )
        assert response.status_code == 201
        comment = response.json()
        assert comment["text"] == "Can't wait!"
        assert comment["userName"] == "Student"
        assert await comment_count(db_session, test_event.id) == 1

        response = await client.get("/api/comments", params={"eventId": test_event.id})
        assert [c["id"] for c in response.json()] == [comment["id"]]

        response = await client.delete(f"/api/comments/{comment['id']}", headers=headers)
        assert response.status_code == 200
        assert await comment_count(db_session, test_event.id) == 0

    async def test_text_and_event_required(self, client: AsyncClient, user_token):
        response = await client.post(
            "/api/comments",
            json={"text": "   "},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Text and eventId are required"

    async def test_too_long(self, client: AsyncClient, user_token, test_event):
        response = await client.post(
            "/api/comments",
            json={"text": "x" * 501, "eventId": test_event.id},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        assert response.status_code == 400

    async def test_unknown_event(self, client: AsyncClient, user_token):
        response = await client.post(
            "/api/comments",
            json={"text": "Hello", "eventId": str(uuid.uuid4())},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        assert response.status_code == 404

    async def test_listing_requires_event_id(self, client: AsyncClient):
        response = await client.get("/api/comments")
        assert response.status_code == 400
        assert response.json()["message"] == "eventId is required"

    async def test_only_author_edits(self, client: AsyncClient, user_token, organizer_token, test_event):
        response = await client.post(
            "/api/comments",
            json={"text": "First!", "eventId": test_event.id},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        comment_id = response.json()["id"]

        response = await client.put(
            f"/api/comments/{comment_id}",
            json={"text": "Edited by someone else"},
            headers={"Authorization": f"Bearer {organizer_token}"}
        )
        assert response.status_code == 403

        response = await client.put(
            f"/api/comments/{comment_id}",
            json={"text": "Second, actually"},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        assert response.status_code == 200
        assert response.json()["text"] == "Second, actually"

    async def test_admin_may_delete_any_comment(self, client: AsyncClient, user_token, organizer_token, admin_token, test_event):
        response = await client.post(
            "/api/comments",
            json={"text": "Spam", "eventId": test_event.id},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        comment_id = response.json()["id"]

        response = await client.delete(
            f"/api/comments/{comment_id}",
            headers={"Authorization": f"Bearer {organizer_token}"}
        )
        assert response.status_code == 403

        response = await client.delete(
            f"/api/comments/{comment_id}",
            headers={"Authorization": f"Bearer {admin_token}"}
        )
        assert response.status_code == 200

    async def test_user_comments_carry_event_titles(self, client: AsyncClient, db_session, user_token, test_user, test_event):
        await client.post(
            "/api/comments",
            json={"text": "Nice", "eventId": test_event.id},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        db_session.add(Comment(
            text="On a vanished event",
            user_id=str(test_user.id),
            user_name="Student",
            event_id=str(uuid.uuid4()),
        ))
        await db_session.commit()

        response = await client.get(f"/api/comments/user/{test_user.id}")

        assert response.status_code == 200
        titles = sorted(c["eventTitle"] for c in response.json())
        assert titles == ["Deleted Event", test_event.title]
