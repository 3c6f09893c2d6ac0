"""
LifeStream Backend: Donation Request Endpoint Tests
=====================================================

What we test:
    ✅ Public create and pending listing
    ✅ Requester listings (recent three, status filter)
    ✅ Admin and volunteer listings gated by stored role
    ✅ Status patch, full replace with upsert, delete
"""

import pytest
from bson import ObjectId


@pytest.fixture
def seeded(fake_db):
    fake_db.users.seed(
        {"email": "boss@x.com", "role": "admin"},
        {"email": "helper@x.com", "role": "volunteer"},
        {"email": "a@x.com", "role": "donor"},
    )
    fake_db.donation_requests.seed(
        {"requester_email": "a@x.com", "recipient_name": "R1", "donation_status": "pending"},
        {"requester_email": "a@x.com", "recipient_name": "R2", "donation_status": "done"},
        {"requester_email": "a@x.com", "recipient_name": "R3", "donation_status": "pending"},
        {"requester_email": "a@x.com", "recipient_name": "R4", "donation_status": "canceled"},
        {"requester_email": "b@x.com", "recipient_name": "R5", "donation_status": "inprogress"},
    )
    return fake_db


def names(response):
    return [doc["recipient_name"] for doc in response.json()]


class TestCreateAndPublicReads:

    @pytest.mark.asyncio
    async def test_create_without_token(self, test_client, fake_db):
        response = await test_client.post(
            "/donations", json={"requester_email": "a@x.com", "donation_status": "pending"}
        )
        assert response.status_code == 200
        assert response.json()["acknowledged"] is True
        assert len(fake_db.donation_requests.documents) == 1

    @pytest.mark.asyncio
    async def test_all_pending(self, test_client, seeded):
        response = await test_client.get("/all-pending")
        assert response.status_code == 200
        assert names(response) == ["R1", "R3"]


class TestRequesterListings:

    @pytest.mark.asyncio
    async def test_limit_caps_at_three_newest(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/donations/limit", params={"email": "a@x.com"}, headers=auth_headers("a@x.com")
        )
        assert response.status_code == 200
        assert names(response) == ["R4", "R3", "R2"]

    @pytest.mark.asyncio
    async def test_limit_requires_token(self, test_client, seeded):
        response = await test_client.get("/donations/limit", params={"email": "a@x.com"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_status_filter(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/donations",
            params={"email": "a@x.com", "status": "pending"},
            headers=auth_headers("a@x.com"),
        )
        assert names(response) == ["R1", "R3"]

    @pytest.mark.asyncio
    async def test_status_all(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/donations",
            params={"email": "a@x.com", "status": "all"},
            headers=auth_headers("a@x.com"),
        )
        assert names(response) == ["R1", "R2", "R3", "R4"]


class TestPrivilegedListings:

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/all-donations", params={"status": "all"}, headers=auth_headers("boss@x.com")
        )
        assert response.status_code == 200
        assert len(response.json()) == 5

    @pytest.mark.asyncio
    async def test_admin_exact_status(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/all-donations", params={"status": "inprogress"}, headers=auth_headers("boss@x.com")
        )
        assert names(response) == ["R5"]

    @pytest.mark.asyncio
    async def test_volunteer_cannot_use_admin_listing(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/all-donations", params={"status": "all"}, headers=auth_headers("helper@x.com")
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_volunteer_listing(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/all-donations/volunteer", params={"status": "done"}, headers=auth_headers("helper@x.com")
        )
        assert response.status_code == 200
        assert names(response) == ["R2"]

    @pytest.mark.asyncio
    async def test_admin_is_not_volunteer(self, test_client, seeded, auth_headers):
        response = await test_client.get(
            "/all-donations/volunteer", params={"status": "all"}, headers=auth_headers("boss@x.com")
        )
        assert response.status_code == 403


class TestSingleRequest:

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client, seeded, auth_headers):
        target = seeded.donation_requests.documents[4]["_id"]
        response = await test_client.get(f"/donations/{target}", headers=auth_headers())
        assert response.status_code == 200
        assert response.json()["_id"] == str(target)
        assert response.json()["recipient_name"] == "R5"

    @pytest.mark.asyncio
    async def test_missing_id_is_null(self, test_client, seeded, auth_headers):
        response = await test_client.get(f"/donations/{ObjectId()}", headers=auth_headers())
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_patch_status_only(self, test_client, seeded, auth_headers):
        target = seeded.donation_requests.documents[0]["_id"]
        response = await test_client.patch(
            f"/donations/{target}",
            json={"donation_status": "inprogress", "recipient_name": "changed"},
            headers=auth_headers(),
        )
        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 1
        stored = seeded.donation_requests.documents[0]
        assert stored["donation_status"] == "inprogress"
        assert stored["recipient_name"] == "R1"

    @pytest.mark.asyncio
    async def test_patch_without_status_writes_null(self, test_client, seeded, auth_headers):
        target = seeded.donation_requests.documents[0]["_id"]
        response = await test_client.patch(
            f"/donations/{target}", json={"recipient_name": "changed"}, headers=auth_headers()
        )
        assert response.status_code == 200
        _, _, update, _ = seeded.donation_requests.calls[-1]
        assert update == {"$set": {"donation_status": None}}
        assert seeded.donation_requests.documents[0]["donation_status"] is None

    @pytest.mark.asyncio
    async def test_any_token_may_mutate(self, test_client, seeded, auth_headers):
        """Mutations are not limited to the requester."""
        target = seeded.donation_requests.documents[4]["_id"]
        response = await test_client.patch(
            f"/donations/{target}", json={"donation_status": "canceled"}, headers=auth_headers("a@x.com")
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_put_replaces_allow_listed_fields(self, test_client, seeded, auth_headers):
        target = seeded.donation_requests.documents[0]["_id"]
        response = await test_client.put(
            f"/donations/{target}",
            json={"recipient_name": "New", "group": "B+", "hospital_name": "DMC", "rogue": True},
            headers=auth_headers(),
        )
        assert response.status_code == 200
        assert response.json()["matchedCount"] == 1
        assert response.json()["upsertedId"] is None

        _, _, update, upsert = seeded.donation_requests.calls[-1]
        assert upsert is True
        assert "rogue" not in update["$set"]
        assert update["$set"]["recipient_name"] == "New"
        assert update["$set"]["donation_status"] is None
        assert len(update["$set"]) == 12

    @pytest.mark.asyncio
    async def test_put_upserts_missing_id(self, test_client, fake_db, auth_headers):
        new_id = ObjectId()
        response = await test_client.put(
            f"/donations/{new_id}",
            json={"requester_email": "a@x.com", "donation_status": "pending"},
            headers=auth_headers(),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["upsertedCount"] == 1
        assert body["upsertedId"] == str(new_id)
        assert fake_db.donation_requests.documents[0]["_id"] == new_id

    @pytest.mark.asyncio
    async def test_delete(self, test_client, seeded, auth_headers):
        target = seeded.donation_requests.documents[1]["_id"]
        response = await test_client.delete(f"/donations/{target}", headers=auth_headers())
        assert response.status_code == 200
        assert response.json() == {"acknowledged": True, "deletedCount": 1}
        assert len(seeded.donation_requests.documents) == 4

    @pytest.mark.asyncio
    async def test_delete_requires_token(self, test_client, seeded):
        target = seeded.donation_requests.documents[1]["_id"]
        response = await test_client.delete(f"/donations/{target}")
        assert response.status_code == 401
        assert len(seeded.donation_requests.documents) == 5
