"""Tests for assistant account management."""

from httpx import AsyncClient

from tests.conftest import auth_header, login


class TestListAssistants:
    """Tests for GET /assistants."""

    async def test_admin_lists(self, client: AsyncClient, admin_token: str, assistant_user):
        response = await client.get("/api/v1/assistants", headers=auth_header(admin_token))

        assert response.status_code == 200
        assert [a["assistant_id"] for a in response.json()] == ["admin", "tony"]

    async def test_assistant_forbidden(self, client: AsyncClient, assistant_token: str):
        response = await client.get("/api/v1/assistants", headers=auth_header(assistant_token))

        assert response.status_code == 403


class TestCreateAssistant:
    """Tests for POST /assistants."""

    async def test_create(self, client: AsyncClient, admin_token: str):
        """Test a created assistant can log in."""
        response = await client.post(
            "/api/v1/assistants",
            json={
                "assistant_id": "nour",
                "name": "Nour Ali",
                "phone": "01234567890",
                "password": "nour1234",
            },
            headers=auth_header(admin_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "assistant"
        assert data["account_state"] == "Activated"
        assert "password" not in data
        assert "password_hash" not in data

        token = await login(client, "nour", "nour1234")
        assert token

    async def test_create_duplicate(self, client: AsyncClient, admin_token: str, assistant_user):
        response = await client.post(
            "/api/v1/assistants",
            json={"assistant_id": "tony", "name": "Tony Again", "password": "secret1"},
            headers=auth_header(admin_token),
        )

        assert response.status_code == 409

    async def test_create_short_password(self, client: AsyncClient, admin_token: str):
        response = await client.post(
            "/api/v1/assistants",
            json={"assistant_id": "nour", "name": "Nour Ali", "password": "123"},
            headers=auth_header(admin_token),
        )

        assert response.status_code == 422


class TestUpdateAssistant:
    """Tests for PATCH /assistants/{assistant_id}."""

    async def test_change_password(self, client: AsyncClient, admin_token: str, assistant_user):
        response = await client.patch(
            "/api/v1/assistants/tony",
            json={"password": "newpass99"},
            headers=auth_header(admin_token),
        )

        assert response.status_code == 200
        old = await client.post(
            "/api/v1/auth/login", json={"assistant_id": "tony", "password": "tony1234"}
        )
        new = await client.post(
            "/api/v1/auth/login", json={"assistant_id": "tony", "password": "newpass99"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_deactivate(self, client: AsyncClient, admin_token: str, assistant_user):
        response = await client.patch(
            "/api/v1/assistants/tony",
            json={"account_state": "Deactivated"},
            headers=auth_header(admin_token),
        )

        assert response.json()["account_state"] == "Deactivated"
        login_response = await client.post(
            "/api/v1/auth/login", json={"assistant_id": "tony", "password": "tony1234"}
        )
        assert login_response.status_code == 403

    async def test_not_found(self, client: AsyncClient, admin_token: str):
        response = await client.patch(
            "/api/v1/assistants/ghost", json={"name": "Ghost"}, headers=auth_header(admin_token)
        )

        assert response.status_code == 404


class TestDeleteAssistant:
    """Tests for DELETE /assistants/{assistant_id}."""

    async def test_delete(self, client: AsyncClient, admin_token: str, assistant_user):
        response = await client.delete("/api/v1/assistants/tony", headers=auth_header(admin_token))

        assert response.status_code == 204
        listing = await client.get("/api/v1/assistants", headers=auth_header(admin_token))
        assert [a["assistant_id"] for a in listing.json()] == ["admin"]

    async def test_cannot_delete_self(self, client: AsyncClient, admin_token: str):
        response = await client.delete("/api/v1/assistants/admin", headers=auth_header(admin_token))

        assert response.status_code == 400

    async def test_not_found(self, client: AsyncClient, admin_token: str):
        response = await client.delete("/api/v1/assistants/ghost", headers=auth_header(admin_token))

        assert response.status_code == 404
