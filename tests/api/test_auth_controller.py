"""
API tests for the authentication controller.

This module covers registration and login, including the uniform failure
responses and the shape of the issued session.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from app.domains.user.service import UserService


class TestRegister:
    """Test cases for POST /api/auth/register."""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient, token_manager):
        payload = {"username": "alice", "email": "alice@example.com", "password": "password123"}

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "User created successfully"
        assert data["user"]["username"] == "alice"
        assert data["user"]["email"] == "alice@example.com"
        assert set(data["user"]) == {"id", "username", "email"}
        claims = token_manager.verify(data["token"])
        assert claims.user_id == data["user"]["id"]
        assert claims.username == "alice"

    @pytest.mark.asyncio
    async def test_register_hebrew_username(self, client: AsyncClient):
        payload = {"username": "דנה", "email": "dana@example.com", "password": "סיסמה"}

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["username"] == "דנה"

    @pytest.mark.asyncio
    async def test_register_does_not_store_plaintext(self, client: AsyncClient, test_db):
        await client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "password123"},
        )

        user = await UserService(test_db).find_user_by_username_or_email("alice")
        assert user.password_hash != "password123"
        assert user.password_hash.startswith("$2")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "alice@example.com", "password": "pw"},
            {"username": "alice", "password": "pw"},
            {"username": "alice", "email": "alice@example.com"},
            {"username": "", "email": "alice@example.com", "password": "pw"},
            {"username": "   ", "email": "alice@example.com", "password": "pw"},
            {},
        ],
    )
    async def test_register_missing_fields(self, client: AsyncClient, payload):
        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "All fields are required"

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, client: AsyncClient, test_user):
        payload = {"username": test_user.username, "email": "other@example.com", "password": "pw"}

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "User already exists"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, test_user):
        payload = {"username": "someone", "email": test_user.email, "password": "pw"}

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "User already exists"

    @pytest.mark.asyncio
    async def test_register_username_too_long(self, client: AsyncClient):
        payload = {"username": "a" * 51, "email": "long@example.com", "password": "pw"}

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid request"

    @pytest.mark.asyncio
    async def test_register_database_failure(self, client: AsyncClient):
        payload = {"username": "alice", "email": "alice@example.com", "password": "pw"}

        with patch.object(
            UserService, "create_user", AsyncMock(side_effect=SQLAlchemyError("db down"))
        ):
            response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Internal server error"
        assert "db down" not in response.text


class TestLogin:
    """Test cases for POST /api/auth/login."""

    @pytest.mark.asyncio
    async def test_login_with_username(self, client: AsyncClient, test_user, test_password, token_manager):
        response = await client.post(
            "/api/auth/login", json={"username": "testuser", "password": test_password}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"] == {"id": test_user.id, "username": "testuser", "email": "test@example.com"}
        assert token_manager.verify(data["token"]).user_id == test_user.id

    @pytest.mark.asyncio
    async def test_login_with_email(self, client: AsyncClient, test_user, test_password):
        response = await client.post(
            "/api/auth/login", json={"username": "test@example.com", "password": test_password}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["id"] == test_user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, client: AsyncClient, test_user):
        wrong_password = await client.post(
            "/api/auth/login", json={"username": "testuser", "password": "not-it"}
        )
        unknown_user = await client.post(
            "/api/auth/login", json={"username": "ghost", "password": "not-it"}
        )

        for response in (wrong_password, unknown_user):
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json()["error"] == "Invalid credentials"
        assert wrong_password.json()["error_code"] == unknown_user.json()["error_code"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"username": "testuser"}, {"password": "pw"}, {"username": "", "password": ""}, {}],
    )
    async def test_login_missing_fields(self, client: AsyncClient, payload):
        response = await client.post("/api/auth/login", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Username and password are required"

    @pytest.mark.asyncio
    async def test_login_database_failure(self, client: AsyncClient):
        with patch.object(
            UserService,
            "find_user_by_username_or_email",
            AsyncMock(side_effect=SQLAlchemyError("db down")),
        ):
            response = await client.post(
                "/api/auth/login", json={"username": "testuser", "password": "pw"}
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Internal server error"
