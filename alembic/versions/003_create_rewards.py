"""003: create rewards table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE rewards (
            id                      UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            cost_id                 VARCHAR(32)     NOT NULL,
            name                    VARCHAR(200)    NOT NULL,
            points_required         BIGINT          NOT NULL,
            monetary_value_cents    BIGINT          NOT NULL DEFAULT 0,
            stock_quantity          INTEGER         NOT NULL DEFAULT 0,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            valid_from              TIMESTAMPTZ,
            valid_until             TIMESTAMPTZ,
            partner_code            VARCHAR(50),
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_rewards_cost_id           UNIQUE (cost_id),
            CONSTRAINT ck_rewards_points_gt_0       CHECK (points_required > 0),
            CONSTRAINT ck_rewards_value_gte_0       CHECK (monetary_value_cents >= 0),
            CONSTRAINT ck_rewards_stock_gte_0       CHECK (stock_quantity >= 0),
            CONSTRAINT ck_rewards_status CHECK (status IN ('ACTIVE', 'INACTIVE')),
            CONSTRAINT ck_rewards_window CHECK (
                valid_from IS NULL OR valid_until IS NULL OR valid_until > valid_from
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_rewards_updated_at
            BEFORE UPDATE ON rewards
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_rewards_status ON rewards (status, created_at DESC);")
    op.execute("COMMENT ON TABLE rewards IS 'Reward catalog — stock decremented only by redemption settlement';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS rewards CASCADE;")
