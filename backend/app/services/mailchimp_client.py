"""
MailChimp Sync Backend — MailChimp API Client
===============================================

What:  Concrete RemoteClient for the MailChimp Marketing API v3.0.
Why:   The only module that knows about URLs, authentication and the
       provider's error format.
How:   One shared httpx.AsyncClient per process (connection reuse), HTTP
       basic auth with the API key, JSON in and out.
Who:   Instantiated once at import; closed by the app lifespan on shutdown.

Error Translation:
    MailChimp reports failures as RFC 7807 problem documents:
        {"type": "...", "title": "Member Exists", "status": 400,
         "detail": "a@x.com is already a list member. ...", "instance": "..."}
    The client raises MailChimpError(detail) (falling back to title, then to
    a generic text). Transport failures (DNS, refused connection, timeout)
    carry the httpx exception text. Nothing is retried.
"""

import hashlib
import logging
import time
import uuid
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.exceptions import MailChimpError
from app.services.remote_base import RemoteClient

logger = logging.getLogger(__name__)


def subscriber_hash(email_address: str) -> str:
    """
    MailChimp's member id for an address: MD5 hex digest of the
    lower-cased email.
    """
    return hashlib.md5(email_address.lower().encode("utf-8")).hexdigest()


class MailChimpClient(RemoteClient):
    """
    httpx-based MailChimp client.

    Args:
        api_key:   MailChimp API key (`<key>-<dc>`)
        base_url:  API root, e.g. https://us6.api.mailchimp.com/3.0/
        timeout:   Seconds per request
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        # Created lazily so the client binds to the running event loop
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=("apikey", self._api_key),
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", path, body)

    async def patch(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", path, body)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def ping(self) -> bool:
        try:
            await self._request("GET", "ping")
            return True
        except MailChimpError as e:
            logger.warning("MailChimp ping failed: %s", e.message)
            return False

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Performs one API call and decodes the response.

        Raises:
            MailChimpError: transport failure or non-2xx response
        """
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            response = await self.client.request(method, path, json=body)
        except httpx.HTTPError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] MailChimp %s %s failed after %.0fms: %s",
                call_id, method, path, duration_ms, str(e),
            )
            raise MailChimpError(
                message=str(e) or type(e).__name__,
                context={"call_id": call_id, "method": method, "path": path},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                "[%s] MailChimp %s %s -> %d in %.0fms: %s",
                call_id, method, path, response.status_code, duration_ms, message,
            )
            raise MailChimpError(
                message=message,
                status=response.status_code,
                context={"call_id": call_id, "method": method, "path": path},
            )

        logger.info(
            "[%s] MailChimp %s %s -> %d in %.0fms",
            call_id, method, path, response.status_code, duration_ms,
        )

        # DELETE answers 204 No Content
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise MailChimpError(
                message="MailChimp returned a response that is not valid JSON",
                status=response.status_code,
                context={"call_id": call_id, "path": path},
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extracts the provider's explanation from a problem document."""
        try:
            problem = response.json()
        except ValueError:
            problem = None
        if isinstance(problem, dict):
            for key in ("detail", "title"):
                if problem.get(key):
                    return str(problem[key])
        return f"MailChimp request failed with status {response.status_code}"

    async def aclose(self) -> None:
        """Closes pooled connections; called on application shutdown."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()


# ── Singleton Instance ────────────────────────────────────────────────────
# Shared so every request reuses the same connection pool
mailchimp_client = MailChimpClient(
    api_key=settings.mailchimp_api_key,
    base_url=settings.mailchimp_api_root,
    timeout=settings.mailchimp_timeout,
)


def get_remote_client() -> RemoteClient:
    """FastAPI dependency returning the process-wide MailChimp client."""
    return mailchimp_client
