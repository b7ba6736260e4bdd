"""Persistence gateway for MailChimp lists."""

from typing import List

from sqlalchemy import select

from app.models.mailchimp_list import MailChimpList
from app.repositories.base import Repository


class ListRepository(Repository[MailChimpList]):
    model = MailChimpList

    async def find_all(self) -> List[MailChimpList]:
        result = await self.db.execute(select(MailChimpList).order_by(MailChimpList.name))
        return list(result.scalars().all())
