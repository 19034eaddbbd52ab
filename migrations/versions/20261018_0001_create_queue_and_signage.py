"""create queue and signage tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("desk_info", sa.String(length=60), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="viewer"),
        _created_at_column(),
        sa.CheckConstraint(
            "role IN ('super_admin', 'editor', 'viewer', 'attendant')",
            name="ck_profiles_role_valid",
        ),
    )

    op.create_table(
        "attendants",
        _id_column(),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("desk_number", sa.String(length=60), nullable=True),
        _created_at_column(),
    )

    op.create_table(
        "service_types",
        _id_column(),
        sa.Column("name", sa.String(length=50), nullable=False),
        _created_at_column(),
    )

    # attendant_ref and service_type_ref carry no foreign keys: deleting an
    # account or a service type must not rewrite ticket history.
    op.create_table(
        "tickets",
        _id_column(),
        sa.Column("number", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="waiting"),
        _created_at_column(),
        sa.Column("called_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("attendant_ref", sa.String(length=64), nullable=True),
        sa.Column("attendant_label", sa.String(length=160), nullable=True),
        sa.Column("service_type_ref", postgresql.UUID(as_uuid=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('waiting', 'called', 'completed')",
            name="ck_tickets_status_valid",
        ),
        sa.CheckConstraint(
            "(status = 'waiting' AND called_at IS NULL AND attendant_ref IS NULL) OR "
            "(status IN ('called', 'completed') AND called_at IS NOT NULL "
            "AND attendant_ref IS NOT NULL)",
            name="ck_tickets_called_fields_match_status",
        ),
        sa.CheckConstraint(
            "service_type_ref IS NULL OR status = 'completed'",
            name="ck_tickets_service_type_only_when_completed",
        ),
    )

    op.create_table(
        "ticket_sequences",
        sa.Column("day", sa.Date(), primary_key=True),
        sa.Column("last_value", sa.Integer(), nullable=False),
    )

    op.create_table(
        "playlists",
        _id_column(),
        sa.Column("name", sa.String(length=120), nullable=False),
        _created_at_column(),
    )

    op.create_table(
        "slides",
        _id_column(),
        sa.Column("playlist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="image"),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        _created_at_column(),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"], ondelete="CASCADE"),
        sa.CheckConstraint("duration > 0", name="ck_slides_duration_positive"),
        sa.CheckConstraint("type IN ('image')", name="ck_slides_type_valid"),
    )

    op.create_table(
        "tvs",
        _id_column(),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("location", sa.String(length=160), nullable=False, server_default=""),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("orientation", sa.String(length=20), nullable=False),
        sa.Column("display_mode", sa.String(length=20), nullable=False, server_default="playlist"),
        sa.Column("assigned_playlist_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("size_inches", sa.Integer(), nullable=True),
        _created_at_column(),
        sa.ForeignKeyConstraint(
            ["assigned_playlist_id"],
            ["playlists.id"],
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(
            "orientation IN ('landscape', 'portrait')",
            name="ck_tvs_orientation_valid",
        ),
        sa.CheckConstraint(
            "display_mode IN ('playlist', 'queue')",
            name="ck_tvs_display_mode_valid",
        ),
    )

    op.create_index("idx_tickets_status", "tickets", ["status"], unique=False)
    op.create_index("idx_tickets_created_at", "tickets", ["created_at"], unique=False)
    op.create_index("idx_tickets_attendant_ref", "tickets", ["attendant_ref"], unique=False)
    op.create_index("idx_slides_playlist_order", "slides", ["playlist_id", "order"], unique=False)
    op.execute("CREATE UNIQUE INDEX uk_service_types_name_ci ON service_types (LOWER(name))")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS uk_service_types_name_ci")
    op.drop_index("idx_slides_playlist_order", table_name="slides")
    op.drop_index("idx_tickets_attendant_ref", table_name="tickets")
    op.drop_index("idx_tickets_created_at", table_name="tickets")
    op.drop_index("idx_tickets_status", table_name="tickets")

    op.drop_table("tvs")
    op.drop_table("slides")
    op.drop_table("playlists")
    op.drop_table("ticket_sequences")
    op.drop_table("tickets")
    op.drop_table("service_types")
    op.drop_table("attendants")
    op.drop_table("profiles")
