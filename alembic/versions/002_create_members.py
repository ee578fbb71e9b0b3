"""002: create members table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE members (
            id                  UUID        PRIMARY KEY DEFAULT gen_random_uuid(),
            member_number       VARCHAR(32) NOT NULL,
            user_id             VARCHAR(64),
            current_tier        VARCHAR(20) NOT NULL DEFAULT 'BRONZE',
            segment             VARCHAR(30) NOT NULL DEFAULT 'STANDARD',
            status              VARCHAR(20) NOT NULL DEFAULT 'ACTIVE',
            available_points    BIGINT      NOT NULL DEFAULT 0,
            total_points        BIGINT      NOT NULL DEFAULT 0,
            lifetime_points     BIGINT      NOT NULL DEFAULT 0,
            version             BIGINT      NOT NULL DEFAULT 0,
            enrolled_at         TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_members_member_number     UNIQUE (member_number),
            CONSTRAINT uq_members_user_id           UNIQUE (user_id),
            CONSTRAINT ck_members_tier CHECK (
                current_tier IN ('BRONZE', 'SILVER', 'GOLD', 'PLATINUM')
            ),
            CONSTRAINT ck_members_status CHECK (
                status IN ('ACTIVE', 'SUSPENDED', 'CLOSED')
            ),
            CONSTRAINT ck_members_available_gte_0   CHECK (available_points >= 0),
            CONSTRAINT ck_members_total_gte_0       CHECK (total_points >= 0),
            CONSTRAINT ck_members_lifetime_gte_0    CHECK (lifetime_points >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_members_updated_at
            BEFORE UPDATE ON members
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE members IS 'Loyalty member accounts — balances written only by the ledger engine';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS members CASCADE;")
