import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlmodel import select

from src.depends import get_token_codec
from src.domain.entities import Session
from tests.utils.json_compare import assert_error_envelope


@pytest.mark.asyncio
async def test_successful_login(client: AsyncClient, signed_up_student, test_data):
    """Successful Login

    Given a student exists with valid credentials
    When I submit login with the email and correct password
    Then I receive an access token and a refresh token
    And both carry the id of the new session
    """
    payload = test_data.get_copy("student_signup")
    response = await client.post("/auth/login", json={
        "identifier": payload["email"],
        "password": payload["password"],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"]["email"] == payload["email"]
    assert data["session"]["expires_in"] == 900

    codec = get_token_codec()
    access = codec.verify(data["session"]["access_token"])
    refresh = codec.verify(data["session"]["refresh_token"])
    assert access.session_id is not None
    assert access.session_id == refresh.session_id
    assert access.user_id == data["user"]["id"]


@pytest.mark.asyncio
async def test_login_with_username(client: AsyncClient, signed_up_student, test_data):
    payload = test_data.get_copy("student_signup")
    response = await client.post("/auth/login", json={
        "identifier": payload["username"],
        "password": payload["password"],
    })

    assert response.status_code == 200
    assert response.json()["user"]["username"] == payload["username"]


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, signed_up_student):
    """Invalid Credentials

    Given a student exists
    When I submit login with an incorrect password
    Then the request fails with 401 Unauthorized
    And error code is INVALID_CREDENTIALS
    """
    response = await client.post("/auth/login", json={
        "identifier": "student@example.com",
        "password": "WrongPassword!",
    })

    assert response.status_code == 401
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    response = await client.post("/auth/login", json={
        "identifier": "nobody@example.com",
        "password": "SecurePass123!",
    })

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_keeps_single_session(client: AsyncClient, db_session, signed_up_student):
    """Every login leaves exactly one session for the account"""
    for _ in range(3):
        response = await client.post("/auth/login", json={
            "identifier": "student@example.com",
            "password": "SecurePass123!",
        })
        assert response.status_code == 200

    sessions = (await db_session.exec(select(Session))).all()
    assert len(sessions) == 1
    assert str(sessions[0].id) == get_token_codec().verify(
        response.json()["session"]["access_token"]
    ).session_id


@pytest.mark.asyncio
async def test_new_login_supersedes_previous_device(client: AsyncClient, signed_up_student):
    """Last Login Wins

    Given I am signed in on device A
    When I sign in on device B
    Then device A's access token is rejected with SESSION_INVALIDATED
    And device A's refresh token is rejected with SESSION_INVALIDATED
    And device B keeps working
    """
    device_a = signed_up_student["session"]

    response = await client.post("/auth/login", json={
        "identifier": "student@example.com",
        "password": "SecurePass123!",
    }, headers={"User-Agent": "device-b"})
    assert response.status_code == 200
    device_b = response.json()["session"]

    me_a = await client.get(
        "/auth/me", headers={"Authorization": f"Bearer {device_a['access_token']}"}
    )
    assert me_a.status_code == 401
    assert me_a.json()["code"] == "SESSION_INVALIDATED"
    assert "another device" in me_a.json()["error"]

    refresh_a = await client.post(
        "/auth/refresh", json={"refresh_token": device_a["refresh_token"]}
    )
    assert refresh_a.status_code == 401
    assert refresh_a.json()["code"] == "SESSION_INVALIDATED"

    me_b = await client.get(
        "/auth/me", headers={"Authorization": f"Bearer {device_b['access_token']}"}
    )
    assert me_b.status_code == 200


@pytest.mark.asyncio
async def test_login_records_device_metadata(client: AsyncClient, db_session, signed_up_student):
    await client.post("/auth/login", json={
        "identifier": "student@example.com",
        "password": "SecurePass123!",
    }, headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "203.0.113.7, 10.0.0.1"})

    session = (await db_session.exec(select(Session))).one()
    assert session.user_agent == "pytest-agent"
    assert session.ip_address == "203.0.113.7"


@pytest.mark.asyncio
async def test_login_email_ignores_case(client: AsyncClient, signed_up_student):
    response = await client.post("/auth/login", json={
        "identifier": "Student@EXAMPLE.com",
        "password": "SecurePass123!",
    })

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "student@example.com"


@pytest.mark.asyncio
async def test_login_storage_failure_returns_envelope(client: AsyncClient, engine):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE students"))

    response = await client.post("/auth/login", json={
        "identifier": "student@example.com",
        "password": "SecurePass123!",
    })

    assert response.status_code == 500
    assert_error_envelope(response.json(), "Internal server error")
