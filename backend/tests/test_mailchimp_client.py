"""
MailChimp Sync Backend — MailChimp Client Unit Tests
======================================================

What:  Tests for MailChimpClient against httpx.MockTransport (no network).

What we test:
    ✅ Requests: method, URL under the API root, basic auth, JSON body
    ✅ Responses: decoded JSON, 204 → {}
    ✅ Errors: problem-document detail / title / status fallback, transport
    ✅ ping() never raises
    ✅ Data center derived from the API key
"""

import base64
import json

import httpx
import pytest

from app.config import Settings
from app.exceptions import MailChimpError, RemoteOperationError
from app.services.mailchimp_client import MailChimpClient, subscriber_hash

API_ROOT = "https://us6.api.mailchimp.com/3.0/"


def make_client(handler) -> MailChimpClient:
    return MailChimpClient(
        api_key="secret-us6",
        base_url=API_ROOT,
        transport=httpx.MockTransport(handler),
    )


class TestRequests:

    @pytest.mark.asyncio
    async def test_post_sends_json_with_basic_auth(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "R1", "status": "subscribed"})

        client = make_client(handler)
        result = await client.post("lists/M1/members", {"email_address": "a@x.com"})
        await client.aclose()

        assert result == {"id": "R1", "status": "subscribed"}
        assert seen["method"] == "POST"
        assert seen["url"] == API_ROOT + "lists/M1/members"
        assert seen["auth"] == "Basic " + base64.b64encode(b"apikey:secret-us6").decode()
        assert seen["body"] == {"email_address": "a@x.com"}

    @pytest.mark.asyncio
    async def test_patch_returns_decoded_body(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": "R2"}))
        assert await client.patch("lists/M1/members/R1", {"status": "pending"}) == {"id": "R2"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_delete_accepts_no_content(self):
        methods = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(204)

        client = make_client(handler)
        assert await client.delete("lists/M1/members/R1") is None
        await client.aclose()
        assert methods == ["DELETE"]


class TestErrors:

    @pytest.mark.asyncio
    async def test_problem_detail_is_the_message(self):
        problem = {
            "type": "https://mailchimp.com/developer/marketing/docs/errors/",
            "title": "Member Exists",
            "status": 400,
            "detail": "a@x.com is already a list member. Use PUT to insert or update list members.",
        }
        client = make_client(lambda request: httpx.Response(400, json=problem))

        with pytest.raises(MailChimpError) as exc_info:
            await client.post("lists/M1/members", {"email_address": "a@x.com"})
        await client.aclose()

        assert exc_info.value.message == problem["detail"]
        assert exc_info.value.status == 400
        assert isinstance(exc_info.value, RemoteOperationError)

    @pytest.mark.asyncio
    async def test_title_is_used_without_detail(self):
        client = make_client(lambda request: httpx.Response(404, json={"title": "Resource Not Found"}))
        with pytest.raises(MailChimpError) as exc_info:
            await client.delete("lists/M1/members/R1")
        await client.aclose()
        assert exc_info.value.message == "Resource Not Found"

    @pytest.mark.asyncio
    async def test_non_json_error_falls_back_to_status(self):
        client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(MailChimpError) as exc_info:
            await client.patch("lists/M1", {"name": "x"})
        await client.aclose()
        assert exc_info.value.message == "MailChimp request failed with status 502"

    @pytest.mark.asyncio
    async def test_transport_failure_is_a_remote_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        client = make_client(handler)
        with pytest.raises(MailChimpError) as exc_info:
            await client.post("lists", {})
        await client.aclose()
        assert exc_info.value.message == "Name or service not known"
        assert exc_info.value.status is None


class TestPing:

    @pytest.mark.asyncio
    async def test_ping_ok(self):
        client = make_client(lambda request: httpx.Response(200, json={"health_status": "Everything's Chimpy!"}))
        assert await client.ping() is True
        await client.aclose()

    @pytest.mark.asyncio
    async def test_ping_failure_returns_false(self):
        client = make_client(lambda request: httpx.Response(401, json={"title": "API Key Invalid"}))
        assert await client.ping() is False
        await client.aclose()


class TestHelpers:

    def test_subscriber_hash_ignores_case(self):
        assert subscriber_hash("A@X.com") == subscriber_hash("a@x.com")
        assert len(subscriber_hash("a@x.com")) == 32

    def test_api_root_from_key_data_center(self):
        settings = Settings(mailchimp_api_key="abc-us19", mailchimp_base_url=None)
        assert settings.mailchimp_api_root == "https://us19.api.mailchimp.com/3.0/"

    def test_explicit_base_url_wins(self):
        settings = Settings(mailchimp_api_key="abc-us19", mailchimp_base_url="http://localhost:9000/3.0")
        assert settings.mailchimp_api_root == "http://localhost:9000/3.0/"

    def test_key_without_data_center_is_a_config_error(self):
        settings = Settings(mailchimp_api_key="abc", mailchimp_base_url=None)
        with pytest.raises(ValueError):
            settings.validate_required_for_production()
