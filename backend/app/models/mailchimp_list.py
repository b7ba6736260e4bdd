"""
MailChimp Sync Backend — MailChimpList SQLAlchemy Model
=========================================================

What:  ORM model for the `mail_chimp_lists` table, the local mirror of a
       MailChimp audience (list).
Who:   Used by ListService for CRUD and by MemberService to resolve the
       remote parent path of a member.

Table Design Rationale:
    - id: 36-char UUID string generated in Python at construction, so the
      local id exists before the provider is ever called
    - mail_chimp_id: NULL until the remote create succeeds; never changed
      by the member flows
    - contact / campaign_defaults: nested provider objects stored as JSON text
"""

import uuid
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.types import JSONText


class MailChimpList(Base):
    """
    A mailing list mirrored locally and on MailChimp.

    Lifecycle:
        1. Constructed from a validated payload (local id assigned)
        2. Persisted only after POST /lists succeeded remotely
        3. Updated in place after a successful remote PATCH
        4. Deleted (with its members) after a successful remote DELETE
    """

    __tablename__ = "mail_chimp_lists"

    # Provider-writable fields, in the order MailChimp documents them
    MAILCHIMP_FIELDS = (
        "name",
        "contact",
        "permission_reminder",
        "use_archive_bar",
        "campaign_defaults",
        "notify_on_subscribe",
        "notify_on_unsubscribe",
        "email_type_option",
        "visibility",
        "double_optin",
        "marketing_permissions",
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[Dict[str, Any]] = mapped_column(JSONText, nullable=False)
    permission_reminder: Mapped[str] = mapped_column(String(255), nullable=False)
    campaign_defaults: Mapped[Dict[str, Any]] = mapped_column(JSONText, nullable=False)
    email_type_option: Mapped[bool] = mapped_column(Boolean, nullable=False)
    use_archive_bar: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    notify_on_subscribe: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notify_on_unsubscribe: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    visibility: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    double_optin: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    marketing_permissions: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Remote identifier assigned by MailChimp
    mail_chimp_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("id", str(uuid.uuid4()))
        super().__init__(**kwargs)

    @property
    def has_remote_binding(self) -> bool:
        """True once the list exists on MailChimp."""
        return bool(self.mail_chimp_id)

    def to_mailchimp_dict(self) -> Dict[str, Any]:
        """Provider-shaped payload; unset fields are left out."""
        data = {}
        for field in self.MAILCHIMP_FIELDS:
            value = getattr(self, field)
            if value is not None:
                data[field] = value
        return data

    def __repr__(self) -> str:
        return f"<MailChimpList(id={self.id}, name='{self.name}', mail_chimp_id={self.mail_chimp_id})>"
