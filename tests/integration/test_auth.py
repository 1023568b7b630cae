"""
Integration tests for authentication endpoints.
Tests registration, the verification gate, admin login, password resets,
profiles and logout against a real database.
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient
from sqlalchemy import select

from eventdekho.core.limiter import limiter
from eventdekho.core.security import SYSTEM_ADMIN_ID
from eventdekho.db.models import PasswordResetToken, User


@pytest.mark.integration
@pytest.mark.asyncio
class TestRegisterAndLogin:
    """Test account creation and login."""

    async def test_organizer_must_wait_for_verification(self, client: AsyncClient, system_admin_token):
        """A new organizer can log in but cannot post until an admin verifies them."""
        response = await client.post(
            "/api/auth/register",
            json={
                "name": "Green Valley School",
                "email": "School@Example.com",
                "password": "secret1",
                "role": "organizer",
                "type": "school",
            }
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["verified"] is False
        assert data["user"]["email"] == "school@example.com"
        user_id = data["user"]["id"]

        response = await client.post(
            "/api/auth/login",
            json={"email": "school@example.com", "password": "wrong-pass"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

        response = await client.post(
            "/api/auth/login",
            json={"email": "school@example.com", "password": "secret1"}
        )
        assert response.status_code == 200
        token = response.json()["token"]

        event = {
            "title": "Robotics Meetup",
            "description": "Build and race line followers",
            "category": "academic_tech",
            "organizerId": user_id,
            "organizerName": "Green Valley School",
            "location": "Pune",
            "date": "2030-03-01",
        }
        response = await client.post("/api/events", json=event, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["message"] == "First wait until admin verify you."

        response = await client.put(
            f"/api/admin/users/{user_id}/verify",
            json={"verified": True},
            headers={"Authorization": f"Bearer {system_admin_token}"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["verified"] is True

        response = await client.post("/api/events", json=event, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 201
        assert response.json()["approved"] is True

    async def test_register_defaults_to_user_role(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "secret1"}
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "user"
        assert response.json()["token"]

    async def test_register_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={"email": "a@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, and password are required"

    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "abc"}
        )
        assert response.status_code == 400
        assert "at least 6 characters" in response.json()["message"]

    async def test_register_duplicate_email(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Again", "email": test_user.email, "password": "secret1"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    async def test_admin_accounts_cannot_self_register(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Sneaky", "email": "sneaky@example.com", "password": "secret1", "role": "admin"}
        )
        assert response.status_code == 403

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "secret1"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


@pytest.mark.integration
@pytest.mark.asyncio
class TestAdminLogin:

    async def test_environment_admin(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/admin/login",
            json={"email": "admin@eventdekho.test", "password": "admin-pass"}
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == SYSTEM_ADMIN_ID
        assert user["role"] == "admin"

        token = response.json()["token"]
        response = await client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    async def test_stored_admin(self, client: AsyncClient, test_admin):
        response = await client.post(
            "/api/auth/admin/login",
            json={"email": test_admin.email, "password": "secret1"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(test_admin.id)

    async def test_regular_user_is_rejected(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/auth/admin/login",
            json={"email": test_user.email, "password": "secret1"}
        )
        assert response.status_code == 401

    async def test_wrong_environment_password(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/admin/login",
            json={"email": "admin@eventdekho.test", "password": "nope"}
        )
        assert response.status_code == 401

    async def test_non_ascii_password(self, client: AsyncClient, test_admin):
        for email in ("admin@eventdekho.test", test_admin.email):
            response = await client.post(
                "/api/auth/admin/login",
                json={"email": email, "password": "pässwört"}
            )
            assert response.status_code == 401
            assert response.json()["message"] == "Invalid admin credentials"

    async def test_non_ascii_email(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/admin/login",
            json={"email": "ädmin@eventdekho.test", "password": "admin-pass"}
        )
        assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.asyncio
class TestLoginRateLimit:

    @pytest.fixture
    def live_limiter(self, monkeypatch):
        monkeypatch.setattr(limiter, "enabled", True)
        limiter.reset()
        yield limiter
        limiter.reset()

    async def test_too_many_logins(self, client: AsyncClient, test_user, live_limiter):
        for _ in range(10):
            response = await client.post(
                "/api/auth/login",
                json={"email": test_user.email, "password": "wrong-pass"}
            )
            assert response.status_code == 401

        response = await client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "wrong-pass"}
        )
        assert response.status_code == 429
        assert response.json()["message"] == "Too many requests"
        assert "10 per 1 minute" in response.json()["error"]


@pytest.mark.integration
@pytest.mark.asyncio
class TestPasswordReset:

    async def test_forgot_then_reset(self, client: AsyncClient, db_session, test_user, outbox):
        response = await client.post("/api/auth/forgot-password", json={"email": test_user.email})
        assert response.status_code == 200
        assert len(outbox) == 1
        assert outbox[0]["To"] == test_user.email

        row = (await db_session.execute(select(PasswordResetToken))).scalars().one()
        assert row.token in outbox[0].get_body(preferencelist=("plain",)).get_content()

        response = await client.post(
            "/api/auth/reset-password",
            json={"token": row.token, "password": "brand-new"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password updated successfully"

        response = await client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "brand-new"}
        )
        assert response.status_code == 200

        # Single use
        response = await client.post(
            "/api/auth/reset-password",
            json={"token": row.token, "password": "another1"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired token"

    async def test_forgot_unknown_email(self, client: AsyncClient, outbox):
        response = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"
        assert outbox == []

    async def test_forgot_without_mailer(self, client: AsyncClient, test_user):
        response = await client.post("/api/auth/forgot-password", json={"email": test_user.email})
        assert response.status_code == 500
        assert response.json()["message"] == "Mailer not configured (SMTP env vars missing)"

    async def test_expired_token(self, client: AsyncClient, db_session, test_user):
        db_session.add(PasswordResetToken(
            user_id=str(test_user.id),
            token="b" * 64,
            expires_at=datetime.utcnow() - timedelta(minutes=1),
        ))
        await db_session.commit()

        response = await client.post(
            "/api/auth/reset-password",
            json={"token": "b" * 64, "password": "brand-new"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Token has expired"

        rows = (await db_session.execute(select(PasswordResetToken))).scalars().all()
        assert rows == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestProfileAndLogout:

    async def test_get_profile(self, client: AsyncClient, user_token, test_user):
        response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {user_token}"})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == test_user.email
        assert "hashedPassword" not in user

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/auth/profile")
        assert response.status_code == 401
        assert response.json()["message"] == "No token, authorization denied"

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json()["message"] == "Token is malformed"

    async def test_update_profile(self, client: AsyncClient, user_token):
        response = await client.put(
            "/api/auth/profile",
            json={"name": "Asha K", "bio": "Loves robotics", "location": "Pune"},
            headers={"Authorization": f"Bearer {user_token}"}
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Asha K"
        assert user["bio"] == "Loves robotics"

    async def test_system_admin_profile_is_synthesized(self, client: AsyncClient, system_admin_token):
        response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {system_admin_token}"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == SYSTEM_ADMIN_ID

    async def test_public_profile(self, client: AsyncClient, test_organizer):
        response = await client.get(f"/api/auth/profile/{test_organizer.id}")
        assert response.status_code == 200
        assert response.json()["name"] == test_organizer.name

        response = await client.get("/api/auth/profile/not-a-user")
        assert response.status_code == 404

    async def test_logout_revokes_token(self, client: AsyncClient, user_token):
        headers = {"Authorization": f"Bearer {user_token}"}
        response = await client.post("/api/auth/logout", headers=headers)
        assert response.status_code == 204

        response = await client.get("/api/auth/profile", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Token has been revoked"

    async def test_delete_account(self, client: AsyncClient, db_session, user_token, test_user):
        headers = {"Authorization": f"Bearer {user_token}"}
        response = await client.delete("/api/auth/profile", headers=headers)
        assert response.status_code == 200

        users = (await db_session.execute(select(User.id))).scalars().all()
        assert str(test_user.id) not in users

        response = await client.get("/api/auth/profile", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Token is not valid"

    async def test_system_admin_cannot_be_deleted(self, client: AsyncClient, system_admin_token):
        response = await client.delete(
            "/api/auth/profile",
            headers={"Authorization": f"Bearer {system_admin_token}"}
        )
        assert response.status_code == 403
        assert response.json()["message"] == "System Admin account cannot be deleted via the API."
