"""Create mail_chimp_lists and mail_chimp_members tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: lists, and members belonging to exactly one list.
How:   Portable column types only (String ids, Text for JSON documents) so
       the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "mail_chimp_lists",
        sa.Column("id", sa.String(36), nullable=False, comment="Local list id (UUID)"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("contact", sa.Text(), nullable=False, comment="JSON: company, address, country, ..."),
        sa.Column("permission_reminder", sa.String(255), nullable=False),
        sa.Column("campaign_defaults", sa.Text(), nullable=False, comment="JSON: from_name, from_email, subject, language"),
        sa.Column("email_type_option", sa.Boolean(), nullable=False),
        sa.Column("use_archive_bar", sa.Boolean(), nullable=True),
        sa.Column("notify_on_subscribe", sa.String(255), nullable=True),
        sa.Column("notify_on_unsubscribe", sa.String(255), nullable=True),
        sa.Column("visibility", sa.String(255), nullable=True),
        sa.Column("double_optin", sa.Boolean(), nullable=True),
        sa.Column("marketing_permissions", sa.Boolean(), nullable=True),
        sa.Column("mail_chimp_id", sa.String(255), nullable=True, comment="MailChimp list id"),
        sa.PrimaryKeyConstraint("id", name="pk_mail_chimp_lists"),
    )

    op.create_table(
        "mail_chimp_members",
        sa.Column("id", sa.String(36), nullable=False, comment="Local member id (UUID)"),
        sa.Column("list_id", sa.String(36), nullable=False, comment="Owning list (local id)"),
        sa.Column("mail_chimp_id", sa.String(255), nullable=True, comment="MailChimp member id"),
        sa.Column("email_address", sa.String(255), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("email_type", sa.String(50), nullable=True),
        sa.Column("language", sa.String(255), nullable=True),
        sa.Column("vip", sa.Boolean(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True, comment="JSON: latitude, longitude"),
        sa.Column("marketing_permissions", sa.Text(), nullable=True, comment="JSON array"),
        sa.Column("ip_signup", sa.String(255), nullable=True),
        sa.Column("timestamp_signup", sa.String(255), nullable=True),
        sa.Column("ip_opt", sa.String(255), nullable=True),
        sa.Column("timestamp_opt", sa.String(255), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True, comment="JSON array"),
        sa.Column("email_id", sa.String(255), nullable=True),
        sa.Column("unique_email_id", sa.String(255), nullable=True),
        sa.Column("member_rating", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_mail_chimp_members"),
        sa.ForeignKeyConstraint(
            ["list_id"], ["mail_chimp_lists.id"],
            name="fk_mail_chimp_members_list_id",
            ondelete="CASCADE",
        ),
    )

    # Duplicate-email check filters on (list_id, email_address)
    op.create_index(
        "idx_mail_chimp_members_list_email",
        "mail_chimp_members",
        ["list_id", "email_address"],
    )


def downgrade() -> None:
    op.drop_index("idx_mail_chimp_members_list_email", table_name="mail_chimp_members")
    op.drop_table("mail_chimp_members")
    op.drop_table("mail_chimp_lists")
