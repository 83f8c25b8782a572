"""Init registrations and webhook_logs

Revision ID: 5b2e8c41d7a3
Revises:
Create Date: 2026-10-19 20:30:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5b2e8c41d7a3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

registration_role = sa.Enum("player", "guard", name="registration_role")
webhook_status = sa.Enum("pending", "sent", "failed", name="webhook_status")
delivery_status = sa.Enum("success", "failed", name="delivery_status")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("role", registration_role, nullable=False),
        sa.Column("first_name", sa.VARCHAR(), nullable=True),
        sa.Column("last_name", sa.VARCHAR(), nullable=True),
        sa.Column("player_class", sa.VARCHAR(), nullable=True),
        sa.Column("phone", sa.VARCHAR(), nullable=True),
        sa.Column("guard_name", sa.VARCHAR(), nullable=True),
        sa.Column("guard_class", sa.VARCHAR(), nullable=True),
        sa.Column("guard_phone", sa.VARCHAR(), nullable=True),
        sa.Column("brings_phone", sa.VARCHAR(), nullable=True),
        sa.Column("willing_to_help", sa.VARCHAR(), nullable=True),
        sa.Column("ip_address", sa.VARCHAR(), nullable=True),
        sa.Column("user_agent", sa.VARCHAR(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column(
            "webhook_status",
            webhook_status,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("discord_message_id", sa.VARCHAR(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_registrations_timestamp"), "registrations", ["timestamp"], unique=False
    )

    op.create_table(
        "webhook_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("registration_id", sa.Integer(), nullable=False),
        sa.Column("attempt", sa.Integer(), nullable=False),
        sa.Column("status", delivery_status, nullable=False),
        sa.Column("response", sa.TEXT(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["registration_id"],
            ["registrations.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_webhook_logs_registration_id"),
        "webhook_logs",
        ["registration_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_webhook_logs_registration_id"), table_name="webhook_logs")
    op.drop_table("webhook_logs")
    op.drop_index(op.f("ix_registrations_timestamp"), table_name="registrations")
    op.drop_table("registrations")
    registration_role.drop(op.get_bind(), checkfirst=True)
    webhook_status.drop(op.get_bind(), checkfirst=True)
    delivery_status.drop(op.get_bind(), checkfirst=True)
