"""
LifeStream Backend: Token Issue, Liveness and Health Tests
============================================================
"""

import pytest

from lifestream.services.token_service import token_service


class TestIssueTokenRoute:

    @pytest.mark.asyncio
    async def test_returns_verifiable_token(self, test_client):
        response = await test_client.post("/jwt", json={"email": "a@x.com"})
        assert response.status_code == 200
        payload = token_service.verify(response.json()["token"])
        assert payload["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_issued_token_opens_protected_route(self, test_client, fake_db):
        fake_db.users.seed({"email": "a@x.com", "role": "donor"})
        token = (await test_client.post("/jwt", json={"email": "a@x.com"})).json()["token"]
        response = await test_client.get(
            "/user", params={"email": "a@x.com"}, headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "donor"

    @pytest.mark.asyncio
    async def test_token_with_audience_opens_protected_route(self, test_client, fake_db):
        fake_db.users.seed({"email": "a@x.com", "role": "donor"})
        issued = await test_client.post("/jwt", json={"email": "a@x.com", "aud": "web"})
        token = issued.json()["token"]
        response = await test_client.get(
            "/user", params={"email": "a@x.com"}, headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json()["email"] == "a@x.com"


class TestLiveness:

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.text == "Life Stream is running"


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unreachable_store(self, test_client, fake_db):
        fake_db.reachable = False
        response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
