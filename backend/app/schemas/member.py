"""
MailChimp Sync Backend — Member Schemas
=========================================

What:  The member validation ruleset and the member API representation.
Why:   Rules are declared once as a Pydantic model and evaluated by a pure
       function (app.validation), identically on create and update.

Ruleset:
    email_address        required, valid email
    status               required, string
    language             optional string
    vip                  optional boolean
    location.latitude    optional integer
    location.longitude   optional integer
    ip_signup            optional IP address
    tags                 optional list

Column types (every other writable field, checked before MailChimp is called):
    email_type                      optional string, up to 50 characters
    timestamp_signup, timestamp_opt optional strings
    email_id, unique_email_id       optional strings
    ip_opt                          optional IP address
    marketing_permissions           optional list of objects
    member_rating                   optional integer (no numeric strings)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, IPvAnyAddress, StrictInt


# ══════════════════════════════════════════════════════════════════════════
# Validation Rules — evaluated against every writable field that is set
# ══════════════════════════════════════════════════════════════════════════


class LocationRules(BaseModel):
    latitude: Optional[int] = None
    longitude: Optional[int] = None


class MemberRules(BaseModel):
    """
    Validation ruleset for a member.

    The second group mirrors the column types of the remaining writable
    fields. Unknown request keys are rejected earlier by the allow-listed
    merge.
    """

    model_config = ConfigDict(extra="ignore")

    email_address: EmailStr
    status: str
    language: Optional[str] = None
    vip: Optional[bool] = None
    location: Optional[LocationRules] = None
    ip_signup: Optional[IPvAnyAddress] = None
    tags: Optional[List[Any]] = None

    email_type: Optional[str] = Field(default=None, max_length=50)
    marketing_permissions: Optional[List[Dict[str, Any]]] = None
    timestamp_signup: Optional[str] = Field(default=None, max_length=255)
    ip_opt: Optional[IPvAnyAddress] = None
    timestamp_opt: Optional[str] = Field(default=None, max_length=255)
    email_id: Optional[str] = Field(default=None, max_length=255)
    unique_email_id: Optional[str] = Field(default=None, max_length=255)
    member_rating: Optional[StrictInt] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MemberResponse(BaseModel):
    """
    What:  Full local representation of a member.
    Who:   Returned by every member endpoint except DELETE.

    The local primary key is published as `member_id`; `mail_chimp_id` is
    the provider's id for the same member.
    """

    member_id: str = Field(description="Local member identifier (UUID)")
    list_id: str = Field(description="Local identifier of the owning list")
    mail_chimp_id: Optional[str] = Field(default=None, description="MailChimp member id")
    email_address: str
    status: str
    email_type: Optional[str] = None
    language: Optional[str] = None
    vip: Optional[bool] = None
    location: Optional[Dict[str, Any]] = None
    marketing_permissions: Optional[List[Dict[str, Any]]] = None
    ip_signup: Optional[str] = None
    timestamp_signup: Optional[str] = None
    ip_opt: Optional[str] = None
    timestamp_opt: Optional[str] = None
    tags: Optional[List[Any]] = None
    email_id: Optional[str] = None
    unique_email_id: Optional[str] = None
    member_rating: Optional[int] = None

    @classmethod
    def from_entity(cls, member) -> "MemberResponse":
        return cls(
            member_id=member.id,
            list_id=member.list_id,
            mail_chimp_id=member.mail_chimp_id,
            email_address=member.email_address,
            status=member.status,
            email_type=member.email_type,
            language=member.language,
            vip=member.vip,
            location=member.location,
            marketing_permissions=member.marketing_permissions,
            ip_signup=member.ip_signup,
            timestamp_signup=member.timestamp_signup,
            ip_opt=member.ip_opt,
            timestamp_opt=member.timestamp_opt,
            tags=member.tags,
            email_id=member.email_id,
            unique_email_id=member.unique_email_id,
            member_rating=member.member_rating,
        )
