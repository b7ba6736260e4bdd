"""
MailChimp Sync Backend — Abstract Remote Client Interface
===========================================================

What:  Abstract base class defining the contract the synchronizers need from
       the email-marketing provider.
Why:   Services depend on this interface only, so tests can substitute an
       in-memory fake and the provider SDK/HTTP details stay in one module.
How:   Concrete implementations inherit from RemoteClient and implement the
       four calls below.
Who:   Called by MemberService, ListService and the health check.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

from app.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)


class RemoteClient(ABC):
    """
    Abstract interface for the provider's REST API.

    Contract:
        - Paths are relative to the API root (e.g. "lists/abc/members")
        - Responses are decoded JSON objects
        - Every failure (transport, timeout, non-2xx) is raised as
          MailChimpError carrying the provider's message verbatim
        - No call is retried

    Implementations:
        - MailChimpClient: httpx against the MailChimp Marketing API v3.0
    """

    @abstractmethod
    async def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a remote resource.

        Returns:
            The created resource; always contains the provider's "id".

        Raises:
            MailChimpError: The provider refused the payload or was unreachable.
        """
        ...

    @abstractmethod
    async def patch(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Partially update a remote resource.

        Returns:
            The updated resource. Its "id" may differ from the one in the
            path (member ids follow the email address).
        """
        ...

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Delete a remote resource."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """
        Lightweight reachability and credentials check.

        Returns: True if the API answered successfully, False otherwise.
        Never raises.
        """
        ...


async def call_remote(
    operation: Callable[..., Awaitable[Optional[Dict[str, Any]]]],
    *args: Any,
) -> Dict[str, Any]:
    """
    Invokes one RemoteClient operation on behalf of a service.

    Any failure becomes a RemoteOperationError whose message is the
    underlying one, unchanged; a None result becomes {}.
    """
    try:
        result = await operation(*args)
    except RemoteOperationError as e:
        logger.error("MailChimp operation failed: %s", e.message)
        raise
    except Exception as e:
        logger.error("MailChimp operation failed: %s", str(e), exc_info=True)
        raise RemoteOperationError(message=str(e)) from e
    return result or {}
