"""
MailChimp Sync Backend — HTTP Endpoint Tests
==============================================

What:  End-to-end requests through the FastAPI app (middleware, handlers,
       routes, services) with the database on SQLite and MailChimp mocked.
How:   `test_client` from conftest; responses are checked for status code
       and the exact `{"message", "errors"?}` body shape.
"""

import pytest

from app.exceptions import MailChimpError
from app.repositories.member_repository import MemberRepository


class TestMemberEndpoints:

    @pytest.mark.asyncio
    async def test_create_member(self, test_client, remote, bound_list):
        response = await test_client.post(
            "/lists/L1/members",
            json={"email_address": "a@x.com", "status": "subscribed"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mail_chimp_id"] == "R1"
        assert data["email_address"] == "a@x.com"
        assert data["status"] == "subscribed"
        assert data["list_id"] == "L1"
        assert data["member_id"]

    @pytest.mark.asyncio
    async def test_create_without_email(self, test_client, remote, bound_list):
        response = await test_client.post("/lists/L1/members", json={"status": "subscribed"})

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid data given"
        assert list(data["errors"]) == ["email_address"]
        assert isinstance(data["errors"]["email_address"], list)
        remote.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client, bound_list):
        response = await test_client.post("/lists/L1/members")
        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"email_address", "status"}

    @pytest.mark.asyncio
    async def test_wrongly_typed_field_is_400_before_remote(self, test_client, remote, bound_list):
        response = await test_client.post(
            "/lists/L1/members",
            json={"email_address": "b@x.com", "status": "subscribed", "member_rating": "high"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid data given"
        assert list(data["errors"]) == ["member_rating"]
        remote.post.assert_not_awaited()

        retry = await test_client.post(
            "/lists/L1/members", json={"email_address": "b@x.com", "status": "subscribed"}
        )
        assert retry.status_code == 200

    @pytest.mark.asyncio
    async def test_wrongly_typed_update_is_400_before_remote(self, test_client, remote, stored_member):
        response = await test_client.patch("/lists/L1/members/m1", json={"timestamp_opt": {"a": 1}})

        assert response.status_code == 400
        assert list(response.json()["errors"]) == ["timestamp_opt"]
        remote.patch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_body_must_be_an_object(self, test_client, bound_list):
        response = await test_client.post("/lists/L1/members", json=["a@x.com"])
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid data given"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client, stored_member):
        response = await test_client.post(
            "/lists/L1/members",
            json={"email_address": "a@x.com", "status": "subscribed"},
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Email exists in given list:L1"}

    @pytest.mark.asyncio
    async def test_unknown_list(self, test_client):
        response = await test_client.get("/lists/nope/members")
        assert response.status_code == 404
        assert response.json() == {"message": "Mailchimp list not found. nope"}

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client, bound_list):
        response = await test_client.get("/lists/L1/members")
        assert response.status_code == 404
        assert response.json() == {"message": "Mailchimp members not found for given list. L1"}

    @pytest.mark.asyncio
    async def test_unbound_list(self, test_client, unbound_list):
        response = await test_client.post(
            "/lists/L2/members",
            json={"email_address": "a@x.com", "status": "subscribed"},
        )
        assert response.status_code == 404
        assert response.json() == {"message": "Mailchimp id is invalid for given list: L2"}

    @pytest.mark.asyncio
    async def test_list_and_get_members(self, test_client, stored_member):
        listing = await test_client.get("/lists/L1/members")
        assert listing.status_code == 200
        assert [m["member_id"] for m in listing.json()] == ["m1"]

        single = await test_client.get("/lists/L1/members/m1")
        assert single.status_code == 200
        assert single.json()["email_address"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_get_unknown_member(self, test_client, bound_list):
        response = await test_client.get("/lists/L1/members/ghost")
        assert response.status_code == 404
        assert response.json() == {"message": "Mailchimp member: ghost not found for given list. L1"}

    @pytest.mark.asyncio
    async def test_update_member(self, test_client, remote, stored_member):
        remote.patch.return_value = {"id": "R2"}

        response = await test_client.patch(
            "/lists/L1/members/m1", json={"email_address": "b@x.com"}
        )

        assert response.status_code == 200
        assert response.json()["email_address"] == "b@x.com"
        assert response.json()["mail_chimp_id"] == "R2"

    @pytest.mark.asyncio
    async def test_remote_refusal_is_400_with_provider_message(self, test_client, remote, stored_member):
        remote.patch.side_effect = MailChimpError(message="Invalid Resource", status=400)

        response = await test_client.patch("/lists/L1/members/m1", json={"status": "pending"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid Resource"}

    @pytest.mark.asyncio
    async def test_remove_member(self, test_client, remote, stored_member, db_session):
        response = await test_client.delete("/lists/L1/members/m1")

        assert response.status_code == 200
        assert response.json() == {}
        remote.delete.assert_awaited_once_with("lists/M1/members/R1")
        assert await MemberRepository(db_session).find_by_list("L1") == []

    @pytest.mark.asyncio
    async def test_remove_keeps_row_when_remote_fails(self, test_client, remote, stored_member, db_session):
        remote.delete.side_effect = MailChimpError(message="Resource Not Found", status=404)

        response = await test_client.delete("/lists/L1/members/m1")

        assert response.status_code == 400
        assert response.json() == {"message": "Resource Not Found"}
        assert len(await MemberRepository(db_session).find_by_list("L1")) == 1


class TestListEndpoints:

    @pytest.mark.asyncio
    async def test_create_and_fetch_list(self, test_client, remote, make_list_payload):
        remote.post.return_value = {"id": "M7"}

        created = await test_client.post("/lists", json=make_list_payload())
        assert created.status_code == 200
        list_id = created.json()["list_id"]
        assert created.json()["mail_chimp_id"] == "M7"

        fetched = await test_client.get(f"/lists/{list_id}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Newsletter"

    @pytest.mark.asyncio
    async def test_no_lists(self, test_client):
        response = await test_client.get("/lists")
        assert response.status_code == 404
        assert response.json() == {"message": "Mailchimp lists not found."}

    @pytest.mark.asyncio
    async def test_invalid_list_payload(self, test_client, remote):
        response = await test_client.post("/lists", json={"name": "Only a name"})
        assert response.status_code == 400
        assert "contact" in response.json()["errors"]
        remote.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_list(self, test_client, remote, stored_member):
        response = await test_client.delete("/lists/L1")
        assert response.status_code == 200
        assert response.json() == {}

        follow_up = await test_client.get("/lists/L1/members")
        assert follow_up.status_code == 404


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_dependencies(self, test_client, remote):
        response = await test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["mailchimp"] == "available"

    @pytest.mark.asyncio
    async def test_mailchimp_down_is_degraded(self, test_client, remote):
        remote.ping.return_value = False
        response = await test_client.get("/health")
        assert response.json()["status"] == "degraded"
        assert response.json()["mailchimp"] == "unavailable"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
