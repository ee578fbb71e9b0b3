"""004: create redemptions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE redemptions (
            id                      BIGSERIAL       PRIMARY KEY,
            redemption_number       VARCHAR(32)     NOT NULL,
            member_id               UUID            NOT NULL REFERENCES members (id),
            reward_id               UUID            NOT NULL REFERENCES rewards (id),
            points_redeemed         BIGINT          NOT NULL,
            monetary_value_cents    BIGINT          NOT NULL DEFAULT 0,
            partner_code            VARCHAR(50),
            fulfillment_status      VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            channel                 VARCHAR(20)     NOT NULL DEFAULT 'ONLINE',
            idempotency_key         VARCHAR(64),
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_redemptions_number        UNIQUE (redemption_number),
            CONSTRAINT ck_redemptions_points_gt_0   CHECK (points_redeemed > 0),
            CONSTRAINT ck_redemptions_fulfillment CHECK (
                fulfillment_status IN ('PENDING', 'FULFILLED', 'CANCELLED')
            ),
            CONSTRAINT ck_redemptions_channel CHECK (
                channel IN ('ONLINE', 'MOBILE', 'STORE', 'CALL_CENTER')
            )
        );
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_redemptions_member_idempotency
        ON redemptions (member_id, idempotency_key)
        WHERE idempotency_key IS NOT NULL;
    """)
    op.execute("CREATE INDEX idx_redemptions_member ON redemptions (member_id, id);")
    op.execute("CREATE INDEX idx_redemptions_reward ON redemptions (reward_id);")
    op.execute("COMMENT ON TABLE redemptions IS 'Redemption records — created atomically with their REDEMPTION ledger entry';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS redemptions CASCADE;")
