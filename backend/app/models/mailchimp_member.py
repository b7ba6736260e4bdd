"""
MailChimp Sync Backend — MailChimpMember SQLAlchemy Model
===========================================================

What:  ORM model for the `mail_chimp_members` table, one subscriber's state
       inside exactly one list.
Who:   Used by MemberService; mirrored to MailChimp at
       lists/{list mail_chimp_id}/members/{member mail_chimp_id}.

Table Design Rationale:
    - id: 36-char UUID string generated at construction (published as
      `member_id` in API responses)
    - list_id: owning list's LOCAL id
    - mail_chimp_id: the provider's member id (MD5 of the lower-cased email);
      it changes when the email changes, so updates re-read it
    - (list_id, email_address) uniqueness is NOT a database constraint; the
      create flow checks it before calling the provider
    - location / marketing_permissions / tags: JSON text
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.types import JSONText


class MailChimpMember(Base):
    """
    A list member mirrored locally and on MailChimp.

    Lifecycle:
        1. Constructed from a normalized create payload (local id assigned)
        2. Persisted only after the provider accepted it (mail_chimp_id set)
        3. Merged, revalidated and persisted after each successful remote PATCH
        4. Deleted only after the provider deleted it
    """

    __tablename__ = "mail_chimp_members"

    # Fields MailChimp accepts on POST/PATCH lists/{id}/members
    MAILCHIMP_FIELDS = (
        "email_address",
        "email_type",
        "status",
        "language",
        "vip",
        "location",
        "marketing_permissions",
        "ip_signup",
        "timestamp_signup",
        "ip_opt",
        "timestamp_opt",
        "tags",
    )

    # Fields a request body may set; the read-only provider fields are
    # accepted so a client can round-trip a representation it fetched
    FILLABLE_FIELDS = MAILCHIMP_FIELDS + (
        "email_id",
        "unique_email_id",
        "member_rating",
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    list_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("mail_chimp_lists.id", ondelete="CASCADE"),
        nullable=False,
    )
    mail_chimp_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    email_address: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    email_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    language: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vip: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    location: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONText, nullable=True)
    marketing_permissions: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(
        JSONText, nullable=True
    )
    ip_signup: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timestamp_signup: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ip_opt: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timestamp_opt: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSONText, nullable=True)
    email_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    unique_email_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    member_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Duplicate detection filters on both columns
    __table_args__ = (
        Index("idx_mail_chimp_members_list_email", "list_id", "email_address"),
    )

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("id", str(uuid.uuid4()))
        super().__init__(**kwargs)

    def fill(self, fields: Dict[str, Any]) -> None:
        """Assigns each given field onto the entity (last write wins)."""
        for name, value in fields.items():
            setattr(self, name, value)

    def to_mailchimp_dict(self) -> Dict[str, Any]:
        """Provider-shaped payload; unset fields are left out."""
        return self._project(self.MAILCHIMP_FIELDS)

    def to_fillable_dict(self) -> Dict[str, Any]:
        """Every client-writable field that is set, for validation."""
        return self._project(self.FILLABLE_FIELDS)

    def _project(self, fields) -> Dict[str, Any]:
        data = {}
        for field in fields:
            value = getattr(self, field)
            if value is not None:
                data[field] = value
        return data

    def __repr__(self) -> str:
        return (
            f"<MailChimpMember(id={self.id}, list_id={self.list_id}, "
            f"email_address='{self.email_address}', mail_chimp_id={self.mail_chimp_id})>"
        )
