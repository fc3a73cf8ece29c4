"""Initial schema: profiles, requests, audit_trail.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="employee"),
        sa.Column("employee_id", sa.Integer(), nullable=True, unique=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("requester_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("purpose", sa.String(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("receipt_url", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("manager_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("manager_comment", sa.String(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_requests_created_at", "requests", ["created_at"])
    op.create_index("ix_requests_requester_id", "requests", ["requester_id"])
    op.create_index("ix_requests_status", "requests", ["status"])
    op.create_index("ix_requests_status_created", "requests", ["status", "created_at"])

    op.create_table(
        "audit_trail",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("request_id", sa.Uuid(), sa.ForeignKey("requests.id"), nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column("performed_by", sa.Uuid(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_trail_request_id", "audit_trail", ["request_id"])
    op.create_index("ix_audit_trail_created_at", "audit_trail", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_trail")
    op.drop_table("requests")
    op.drop_table("profiles")
