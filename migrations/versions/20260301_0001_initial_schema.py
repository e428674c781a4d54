"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-03-01 10:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

APP_ROLE = postgresql.ENUM(
    "admin", "user", "vendedor", "financeiro", name="app_role", create_type=False
)
ORDER_STATUS = postgresql.ENUM(
    "awaiting_payment",
    "creating_art",
    "production",
    "shipping",
    "delivered",
    name="order_status",
    create_type=False,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _id() -> sa.Column:
    return sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False)


def upgrade() -> None:
    bind = op.get_bind()
    APP_ROLE.create(bind, checkfirst=True)
    ORDER_STATUS.create(bind, checkfirst=True)

    op.create_table(
        "admin_users",
        _id(),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_admin_users")),
        sa.UniqueConstraint("username", name=op.f("uq_admin_users_username")),
    )

    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )

    op.create_table(
        "user_roles",
        _id(),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("role", APP_ROLE, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_user_roles_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_roles")),
    )
    op.create_index(op.f("ix_user_roles_user_id"), "user_roles", ["user_id"])

    op.create_table(
        "login_attempts",
        _id(),
        sa.Column("identifier", sa.String(length=255), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column(
            "attempted_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_login_attempts")),
    )
    op.create_index(
        op.f("ix_login_attempts_identifier"), "login_attempts", ["identifier"]
    )
    op.create_index(
        op.f("ix_login_attempts_attempted_at"), "login_attempts", ["attempted_at"]
    )

    op.create_table(
        "video_testimonials",
        _id(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("video_url", sa.Text(), nullable=False),
        sa.Column("video_type", sa.String(length=20), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_video_testimonials")),
    )

    op.create_table(
        "orders",
        _id(),
        sa.Column("number", sa.String(length=20), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("status", ORDER_STATUS, nullable=False),
        sa.Column("total", sa.Numeric(precision=12, scale=2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_orders")),
        sa.UniqueConstraint("number", name=op.f("uq_orders_number")),
    )

    op.create_table(
        "order_trackings",
        _id(),
        sa.Column("order_id", sa.BigInteger(), nullable=True),
        sa.Column("order_number", sa.String(length=20), nullable=True),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("client_phone", sa.String(length=20), nullable=True),
        sa.Column("tracking_code", sa.String(length=30), nullable=False),
        sa.Column("carrier", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("events", postgresql.JSONB(), nullable=False),
        sa.Column("estimated_delivery", sa.Date(), nullable=True),
        sa.Column("last_update", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["order_id"],
            ["orders.id"],
            name=op.f("fk_order_trackings_order_id_orders"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_order_trackings")),
    )
    op.create_index(
        op.f("ix_order_trackings_order_id"), "order_trackings", ["order_id"]
    )
    op.create_index(
        op.f("ix_order_trackings_tracking_code"), "order_trackings", ["tracking_code"]
    )

    op.create_table(
        "company",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("logo_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_company")),
    )


def downgrade() -> None:
    op.drop_table("company")
    op.drop_index(op.f("ix_order_trackings_tracking_code"), table_name="order_trackings")
    op.drop_index(op.f("ix_order_trackings_order_id"), table_name="order_trackings")
    op.drop_table("order_trackings")
    op.drop_table("orders")
    op.drop_table("video_testimonials")
    op.drop_index(op.f("ix_login_attempts_attempted_at"), table_name="login_attempts")
    op.drop_index(op.f("ix_login_attempts_identifier"), table_name="login_attempts")
    op.drop_table("login_attempts")
    op.drop_index(op.f("ix_user_roles_user_id"), table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_table("users")
    op.drop_table("admin_users")

    ORDER_STATUS.drop(op.get_bind(), checkfirst=True)
    APP_ROLE.drop(op.get_bind(), checkfirst=True)
