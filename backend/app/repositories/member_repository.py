"""
Persistence gateway for list members.

Every lookup is scoped to a list's local id: a member id that exists in a
different list is treated as absent.
"""

from typing import List

from sqlalchemy import delete

from app.models.mailchimp_member import MailChimpMember
from app.repositories.base import Repository


class MemberRepository(Repository[MailChimpMember]):
    model = MailChimpMember

    async def find_by_list(self, list_id: str) -> List[MailChimpMember]:
        return await self.find_by(list_id=list_id)

    async def find_in_list(self, list_id: str, member_id: str) -> List[MailChimpMember]:
        """Zero or one row in practice; callers take the first entry."""
        return await self.find_by(list_id=list_id, id=member_id)

    async def find_by_email(self, list_id: str, email_address: str) -> List[MailChimpMember]:
        """Exact-match lookup used only for duplicate detection."""
        return await self.find_by(list_id=list_id, email_address=email_address)

    async def remove_by_list(self, list_id: str) -> int:
        """Deletes every member of a list; returns the number of rows removed."""
        result = await self.db.execute(
            delete(MailChimpMember).where(MailChimpMember.list_id == list_id)
        )
        await self.db.flush()
        return result.rowcount or 0
