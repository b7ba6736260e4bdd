"""
MailChimp Sync Backend — Member Service (Write-Through Synchronizer)
=====================================================================

What:  Create / read / update / remove of list members, keeping the local
       row and the MailChimp member consistent.
Who:   Called by the member route handlers; calls the repositories and the
       RemoteClient.

Write-Through Contract:
    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌──────────┐
    │ Resolve  │───▶│ Normalize  │───▶│  MailChimp   │───▶│  Local   │
    │ list (+  │    │ & validate │    │  POST/PATCH/ │    │  persist │
    │ member)  │    │ (+ dupes)  │    │  DELETE      │    │ / remove │
    └──────────┘    └────────────┘    └──────────────┘    └──────────┘

    - Every refusal before the remote call leaves both sides untouched
    - A remote failure leaves the local side untouched (a member is never
      deleted locally while MailChimp still has it)
    - Only a remote success is written locally

    The duplicate-email check and the remote create are two separate steps;
    concurrent creates for the same address can both pass the check. The
    provider itself rejects the second one in most cases ("Member Exists").
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    DuplicateEmailError,
    InvalidRemoteBindingError,
    ListNotFoundError,
    MemberNotFoundError,
    MembersNotFoundError,
    MissingEmailError,
    PayloadValidationError,
    RemoteOperationError,
)
from app.models.mailchimp_list import MailChimpList
from app.models.mailchimp_member import MailChimpMember
from app.repositories.list_repository import ListRepository
from app.repositories.member_repository import MemberRepository
from app.schemas.member import MemberResponse
from app.services.mailchimp_client import mailchimp_client, subscriber_hash
from app.services.remote_base import RemoteClient, call_remote
from app.validation import check_allowed_fields, normalize_flags, validate_member

logger = logging.getLogger(__name__)

# Keys a create body may carry besides the member fields; list_id is
# accepted but always replaced by the path value
CREATE_EXTRA_FIELDS = ("list_id",)
READ_ONLY_FIELDS = ("member_id", "mail_chimp_id")
BOOLEAN_FLAGS = ("vip",)


class MemberService:
    """
    Business logic for members nested under a list.

    Responsibilities:
        - list_members() / get_member(): local reads, no provider call
        - create_member(): validate → dedupe → remote POST → persist
        - update_member(): merge → revalidate → remote PATCH → persist
        - remove_member(): remote DELETE → local delete

    Stateless apart from the remote client; each call receives the
    request-scoped session.
    """

    def __init__(self, remote: RemoteClient):
        self.remote = remote

    # ══════════════════════════════════════════════════════════════════════
    # Read flows
    # ══════════════════════════════════════════════════════════════════════

    async def list_members(self, db: AsyncSession, list_id: str) -> List[MemberResponse]:
        """
        All members of a list.

        Raises:
            ListNotFoundError: unknown list id (→ 404)
            MembersNotFoundError: the list has no members (→ 404)
        """
        await self._get_list(ListRepository(db), list_id)
        members = await MemberRepository(db).find_by_list(list_id)
        if not members:
            raise MembersNotFoundError(list_id)
        return [MemberResponse.from_entity(member) for member in members]

    async def get_member(self, db: AsyncSession, list_id: str, member_id: str) -> MemberResponse:
        await self._get_list(ListRepository(db), list_id)
        member = await self._get_member(MemberRepository(db), list_id, member_id)
        return MemberResponse.from_entity(member)

    # ══════════════════════════════════════════════════════════════════════
    # Write flows
    # ══════════════════════════════════════════════════════════════════════

    async def create_member(
        self,
        db: AsyncSession,
        list_id: str,
        payload: Mapping[str, Any],
    ) -> MemberResponse:
        """
        Subscribe a new member to a list on MailChimp, then mirror it locally.

        Workflow Steps:
            1. Resolve the list (ListNotFoundError)
            2. Require its MailChimp id (InvalidRemoteBindingError)
            3. Normalize: allow-list keys, coerce `vip`, force `list_id`
            4. Build the candidate (local id generated here)
            5. Validate every writable field that is set (PayloadValidationError)
            6. Reject an address already in this list (DuplicateEmailError)
            7. POST lists/{list mail_chimp_id}/members (RemoteOperationError)
            8. Store the returned id and persist

        Returns:
            MemberResponse with the provider's id in `mail_chimp_id`
        """
        lists = ListRepository(db)
        members = MemberRepository(db)

        mailing_list = await self._get_list(lists, list_id)
        self._require_remote_binding(mailing_list)

        fields = dict(payload)
        errors = check_allowed_fields(
            fields,
            MailChimpMember.FILLABLE_FIELDS + CREATE_EXTRA_FIELDS,
            read_only=READ_ONLY_FIELDS,
        )
        if errors:
            raise PayloadValidationError(errors)
        normalize_flags(fields, BOOLEAN_FLAGS)
        fields["list_id"] = mailing_list.id

        member = MailChimpMember(**fields)

        errors = validate_member(member.to_fillable_dict())
        if errors:
            logger.warning("Rejected member for list %s: %s", list_id, sorted(errors))
            raise PayloadValidationError(errors)

        await self._ensure_email_available(members, list_id, member.email_address)

        response = await call_remote(
            self.remote.post,
            f"lists/{mailing_list.mail_chimp_id}/members",
            member.to_mailchimp_dict(),
        )
        member.mail_chimp_id = self._remote_id(response)

        await members.persist(member)
        logger.info(
            "Member %s created in list %s (mail_chimp_id=%s)",
            member.id, list_id, member.mail_chimp_id,
        )
        return MemberResponse.from_entity(member)

    async def update_member(
        self,
        db: AsyncSession,
        list_id: str,
        member_id: str,
        payload: Mapping[str, Any],
    ) -> MemberResponse:
        """
        Merge a partial body onto a member, push it to MailChimp, persist.

        Fields absent from the body keep their stored values. The merged
        state only reaches the database after MailChimp accepted it; if the
        provider answers with a different member id (it does when the email
        changes) the new id is adopted.
        """
        members = MemberRepository(db)

        mailing_list = await self._get_list(ListRepository(db), list_id)
        member = await self._get_member(members, list_id, member_id)
        self._require_remote_binding(mailing_list)

        fields = dict(payload)
        errors = check_allowed_fields(
            fields,
            MailChimpMember.FILLABLE_FIELDS,
            read_only=READ_ONLY_FIELDS + CREATE_EXTRA_FIELDS,
        )
        if errors:
            raise PayloadValidationError(errors)
        normalize_flags(fields, BOOLEAN_FLAGS)

        # Address the provider by the id it knows before the merge
        path = f"lists/{mailing_list.mail_chimp_id}/members/{self._remote_member_id(member)}"

        member.fill(fields)

        errors = validate_member(member.to_fillable_dict())
        if errors:
            members.discard_changes(member)
            logger.warning("Rejected update of member %s: %s", member_id, sorted(errors))
            raise PayloadValidationError(errors)

        try:
            response = await call_remote(self.remote.patch, path, member.to_mailchimp_dict())
        except RemoteOperationError:
            members.discard_changes(member)
            raise

        remote_id = response.get("id")
        if remote_id and remote_id != member.mail_chimp_id:
            logger.info(
                "Member %s changed mail_chimp_id %s -> %s",
                member.id, member.mail_chimp_id, remote_id,
            )
            member.mail_chimp_id = remote_id

        await members.persist(member)
        logger.info("Member %s updated in list %s", member.id, list_id)
        return MemberResponse.from_entity(member)

    async def remove_member(self, db: AsyncSession, list_id: str, member_id: str) -> Dict[str, Any]:
        """
        Delete a member on MailChimp, then locally.

        Returns:
            {} on success

        Raises:
            RemoteOperationError: the local row is kept, so it never
            disappears while the provider still has the member
        """
        members = MemberRepository(db)

        mailing_list = await self._get_list(ListRepository(db), list_id)
        member = await self._get_member(members, list_id, member_id)
        self._require_remote_binding(mailing_list)

        await call_remote(
            self.remote.delete,
            f"lists/{mailing_list.mail_chimp_id}/members/{self._remote_member_id(member)}",
        )

        await members.remove(member)
        logger.info("Member %s removed from list %s", member_id, list_id)
        return {}

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    @staticmethod
    async def _get_list(lists: ListRepository, list_id: str) -> MailChimpList:
        mailing_list = await lists.find(list_id)
        if mailing_list is None:
            raise ListNotFoundError(list_id)
        return mailing_list

    @staticmethod
    async def _get_member(members: MemberRepository, list_id: str, member_id: str) -> MailChimpMember:
        found = await members.find_in_list(list_id, member_id)
        if not found:
            raise MemberNotFoundError(member_id, list_id)
        return found[0]

    @staticmethod
    def _require_remote_binding(mailing_list: MailChimpList) -> None:
        if not mailing_list.has_remote_binding:
            raise InvalidRemoteBindingError(mailing_list.id)

    @staticmethod
    async def _ensure_email_available(
        members: MemberRepository,
        list_id: str,
        email_address: str,
    ) -> None:
        # The ruleset reports a missing email first; this covers direct callers
        if not email_address:
            raise MissingEmailError(list_id)
        if await members.find_by_email(list_id, email_address):
            logger.warning("Duplicate email %s for list %s", email_address, list_id)
            raise DuplicateEmailError(list_id, email_address)

    @staticmethod
    def _remote_member_id(member: MailChimpMember) -> str:
        # Rows always carry the provider id; the hash covers rows imported without one
        return member.mail_chimp_id or subscriber_hash(member.email_address)

    @staticmethod
    def _remote_id(response: Mapping[str, Any]) -> str:
        remote_id = response.get("id")
        if not remote_id:
            raise RemoteOperationError(message="MailChimp response did not include an id")
        return str(remote_id)


# ── Singleton Instance ────────────────────────────────────────────────────
member_service = MemberService(remote=mailchimp_client)


def get_member_service() -> MemberService:
    """FastAPI dependency; tests override it with a fake-backed service."""
    return member_service
