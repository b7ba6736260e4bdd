"""
MailChimp Sync Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for every way a list or member
       operation can be refused.
Why:   Services raise these instead of building responses; the global
       handlers in main.py translate each one into a fixed status code and
       the `{"message": ..., "errors"?: ...}` body.
Who:   Raised by services and the MailChimp client; caught by global handlers.

Exception Hierarchy:
    MailChimpSyncError (base)
    ├── NotFoundError                   → 404
    │   ├── ListNotFoundError
    │   ├── ListsNotFoundError
    │   ├── MemberNotFoundError
    │   ├── MembersNotFoundError
    │   └── InvalidRemoteBindingError
    ├── PayloadValidationError          → 400 (carries field → [reasons])
    ├── DuplicateEmailError             → 400
    ├── MissingEmailError               → 400
    └── RemoteOperationError            → 400 (provider message verbatim)
        └── MailChimpError              raised by the HTTP client
"""

from typing import Any, Dict, List, Optional


class MailChimpSyncError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# 404 — the addressed resource cannot be used
# ══════════════════════════════════════════════════════════════════════════

class NotFoundError(MailChimpSyncError):
    """Raised when a requested resource does not exist locally."""

    status_code = 404


class ListNotFoundError(NotFoundError):
    def __init__(self, list_id: str):
        super().__init__(
            message=f"Mailchimp list not found. {list_id}",
            context={"list_id": list_id},
        )
        self.list_id = list_id


class ListsNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Mailchimp lists not found.")


class MemberNotFoundError(NotFoundError):
    """No member with this id exists inside the given list."""

    def __init__(self, member_id: str, list_id: str):
        super().__init__(
            message=f"Mailchimp member: {member_id} not found for given list. {list_id}",
            context={"member_id": member_id, "list_id": list_id},
        )
        self.member_id = member_id
        self.list_id = list_id


class MembersNotFoundError(NotFoundError):
    """The list exists but holds no members."""

    def __init__(self, list_id: str):
        super().__init__(
            message=f"Mailchimp members not found for given list. {list_id}",
            context={"list_id": list_id},
        )
        self.list_id = list_id


class InvalidRemoteBindingError(NotFoundError):
    """
    The list was never created remotely (no MailChimp id), so nothing that
    addresses it on the provider side can proceed.
    """

    def __init__(self, list_id: str):
        super().__init__(
            message=f"Mailchimp id is invalid for given list: {list_id}",
            context={"list_id": list_id},
        )
        self.list_id = list_id


# ══════════════════════════════════════════════════════════════════════════
# 400 — the client can fix the request
# ══════════════════════════════════════════════════════════════════════════

class PayloadValidationError(MailChimpSyncError):
    """
    Raised when a payload fails the validation ruleset.

    Example response:
        {
            "message": "Invalid data given",
            "errors": {"email_address": ["Field required"]}
        }
    """

    status_code = 400

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(message="Invalid data given", context={"fields": sorted(errors)})
        self.errors = errors


class DuplicateEmailError(MailChimpSyncError):
    status_code = 400

    def __init__(self, list_id: str, email_address: Optional[str] = None):
        super().__init__(
            message=f"Email exists in given list:{list_id}",
            context={"list_id": list_id, "email_address": email_address},
        )
        self.list_id = list_id


class MissingEmailError(MailChimpSyncError):
    status_code = 400

    def __init__(self, list_id: str):
        super().__init__(
            message=f"Email missing from payload:{list_id}",
            context={"list_id": list_id},
        )
        self.list_id = list_id


class RemoteOperationError(MailChimpSyncError):
    """
    Raised when the MailChimp API refuses or cannot be reached.

    The message is the provider's own text, passed through unchanged so the
    client sees exactly why MailChimp said no (e.g. "... is already a list
    member"). Nothing local is written after one of these.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "MailChimp request failed",
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status is not None:
            ctx["status"] = status
        super().__init__(message=message, context=ctx)
        self.status = status


class MailChimpError(RemoteOperationError):
    """Transport or HTTP failure raised by the MailChimp client."""
