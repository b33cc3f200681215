"""
Name: API Test Fixtures

Responsibilities:
  - Provide a TestClient over the real app (in-memory container)
  - Log users in through /auth/google with fake credentials
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from slotbook.container import get_role_service
from slotbook.identity.users import UserRole


@pytest.fixture
def client():
    from slotbook.api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    """R: Pre-assign the role, sign in and return (headers, user json)."""

    def _login(email: str, role: UserRole = UserRole.SCHOLAR, name: str = ""):
        if role != UserRole.SCHOLAR:
            get_role_service().assign_role(email, role)
        credential = f"fake:{email}:{name}" if name else f"fake:{email}"
        response = client.post("/auth/google", json={"credential": credential})
        assert response.status_code == 200, response.text
        body = response.json()
        client.cookies.clear()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _login


@pytest.fixture
def future_day() -> date:
    return date.today() + timedelta(days=7)
