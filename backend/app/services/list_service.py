"""
MailChimp Sync Backend — List Service
=======================================

What:  Create / read / update / remove of MailChimp lists (audiences).
How:   Same write-through contract as MemberService: validate locally,
       call MailChimp, and only then write the local mirror.
Who:   Called by the list route handlers.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    InvalidRemoteBindingError,
    ListNotFoundError,
    ListsNotFoundError,
    PayloadValidationError,
    RemoteOperationError,
)
from app.models.mailchimp_list import MailChimpList
from app.repositories.list_repository import ListRepository
from app.repositories.member_repository import MemberRepository
from app.schemas.mailchimp_list import ListResponse
from app.services.mailchimp_client import mailchimp_client
from app.services.remote_base import RemoteClient, call_remote
from app.validation import check_allowed_fields, normalize_flags, validate_list

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = ("list_id", "mail_chimp_id")
BOOLEAN_FLAGS = ("email_type_option", "use_archive_bar", "double_optin", "marketing_permissions")


class ListService:
    """Business logic for lists; stateless apart from the remote client."""

    def __init__(self, remote: RemoteClient):
        self.remote = remote

    async def list_lists(self, db: AsyncSession) -> List[ListResponse]:
        lists = await ListRepository(db).find_all()
        if not lists:
            raise ListsNotFoundError()
        return [ListResponse.from_entity(mailing_list) for mailing_list in lists]

    async def get_list(self, db: AsyncSession, list_id: str) -> ListResponse:
        mailing_list = await self._get_list(ListRepository(db), list_id)
        return ListResponse.from_entity(mailing_list)

    async def create_list(self, db: AsyncSession, payload: Mapping[str, Any]) -> ListResponse:
        """
        Workflow Steps:
            1. Allow-list keys and coerce boolean flags
            2. Validate the provider projection (PayloadValidationError)
            3. POST lists (RemoteOperationError → nothing stored)
            4. Store the returned id and persist
        """
        lists = ListRepository(db)

        fields = dict(payload)
        errors = check_allowed_fields(fields, MailChimpList.MAILCHIMP_FIELDS, read_only=READ_ONLY_FIELDS)
        if errors:
            raise PayloadValidationError(errors)
        normalize_flags(fields, BOOLEAN_FLAGS)

        mailing_list = MailChimpList(**fields)
        body = mailing_list.to_mailchimp_dict()

        errors = validate_list(body)
        if errors:
            logger.warning("Rejected list payload: %s", sorted(errors))
            raise PayloadValidationError(errors)

        response = await call_remote(self.remote.post, "lists", body)
        remote_id = response.get("id")
        if not remote_id:
            raise RemoteOperationError(message="MailChimp response did not include an id")
        mailing_list.mail_chimp_id = str(remote_id)

        await lists.persist(mailing_list)
        logger.info("List %s created (mail_chimp_id=%s)", mailing_list.id, mailing_list.mail_chimp_id)
        return ListResponse.from_entity(mailing_list)

    async def update_list(
        self,
        db: AsyncSession,
        list_id: str,
        payload: Mapping[str, Any],
    ) -> ListResponse:
        lists = ListRepository(db)
        mailing_list = await self._get_list(lists, list_id)

        fields = dict(payload)
        errors = check_allowed_fields(fields, MailChimpList.MAILCHIMP_FIELDS, read_only=READ_ONLY_FIELDS)
        if errors:
            raise PayloadValidationError(errors)
        normalize_flags(fields, BOOLEAN_FLAGS)

        for name, value in fields.items():
            setattr(mailing_list, name, value)
        body = mailing_list.to_mailchimp_dict()

        errors = validate_list(body)
        if errors:
            lists.discard_changes(mailing_list)
            raise PayloadValidationError(errors)

        if not mailing_list.has_remote_binding:
            lists.discard_changes(mailing_list)
            raise InvalidRemoteBindingError(list_id)

        try:
            await call_remote(self.remote.patch, f"lists/{mailing_list.mail_chimp_id}", body)
        except RemoteOperationError:
            lists.discard_changes(mailing_list)
            raise

        await lists.persist(mailing_list)
        logger.info("List %s updated", list_id)
        return ListResponse.from_entity(mailing_list)

    async def remove_list(self, db: AsyncSession, list_id: str) -> Dict[str, Any]:
        """
        Delete a list on MailChimp, then its local members and the list.

        MailChimp drops the list's members together with the list, so the
        local member rows go too.
        """
        lists = ListRepository(db)
        mailing_list = await self._get_list(lists, list_id)
        if not mailing_list.has_remote_binding:
            raise InvalidRemoteBindingError(list_id)

        await call_remote(self.remote.delete, f"lists/{mailing_list.mail_chimp_id}")

        removed = await MemberRepository(db).remove_by_list(list_id)
        await lists.remove(mailing_list)
        logger.info("List %s removed with %d members", list_id, removed)
        return {}

    @staticmethod
    async def _get_list(lists: ListRepository, list_id: str) -> MailChimpList:
        mailing_list = await lists.find(list_id)
        if mailing_list is None:
            raise ListNotFoundError(list_id)
        return mailing_list


list_service = ListService(remote=mailchimp_client)


def get_list_service() -> ListService:
    return list_service
