"""
MailChimp Sync Backend — List Schemas
=======================================

What:  Validation ruleset and API representation for MailChimp lists.
How:   Nested objects mirror the provider's `contact` and
       `campaign_defaults` blocks; all required parts are enforced locally
       so MailChimp is never called with a payload it would reject for a
       missing field.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactRules(BaseModel):
    company: str
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    zip: str
    country: str = Field(min_length=2, max_length=2)
    phone: Optional[str] = None


class CampaignDefaultsRules(BaseModel):
    from_name: str
    from_email: str
    subject: str
    language: str


class ListRules(BaseModel):
    """Validation ruleset for a list."""

    model_config = ConfigDict(extra="ignore")

    name: str
    permission_reminder: str
    email_type_option: bool
    contact: ContactRules
    campaign_defaults: CampaignDefaultsRules
    notify_on_subscribe: Optional[EmailStr] = None
    notify_on_unsubscribe: Optional[EmailStr] = None
    use_archive_bar: Optional[bool] = None
    double_optin: Optional[bool] = None
    marketing_permissions: Optional[bool] = None
    visibility: Optional[Literal["pub", "prv"]] = None


class ListResponse(BaseModel):
    """Full local representation of a list; the local id is `list_id`."""

    list_id: str = Field(description="Local list identifier (UUID)")
    mail_chimp_id: Optional[str] = Field(default=None, description="MailChimp list id")
    name: str
    contact: Dict[str, Any]
    permission_reminder: str
    campaign_defaults: Dict[str, Any]
    email_type_option: bool
    use_archive_bar: Optional[bool] = None
    notify_on_subscribe: Optional[str] = None
    notify_on_unsubscribe: Optional[str] = None
    visibility: Optional[str] = None
    double_optin: Optional[bool] = None
    marketing_permissions: Optional[bool] = None

    @classmethod
    def from_entity(cls, mailing_list) -> "ListResponse":
        return cls(
            list_id=mailing_list.id,
            mail_chimp_id=mailing_list.mail_chimp_id,
            name=mailing_list.name,
            contact=mailing_list.contact,
            permission_reminder=mailing_list.permission_reminder,
            campaign_defaults=mailing_list.campaign_defaults,
            email_type_option=mailing_list.email_type_option,
            use_archive_bar=mailing_list.use_archive_bar,
            notify_on_subscribe=mailing_list.notify_on_subscribe,
            notify_on_unsubscribe=mailing_list.notify_on_unsubscribe,
            visibility=mailing_list.visibility,
            double_optin=mailing_list.double_optin,
            marketing_permissions=mailing_list.marketing_permissions,
        )
