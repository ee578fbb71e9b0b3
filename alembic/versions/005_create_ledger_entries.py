"""005: create ledger_entries table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE ledger_entries (
            id                  BIGSERIAL       PRIMARY KEY,
            reference_number    VARCHAR(32)     NOT NULL,
            member_id           UUID            NOT NULL REFERENCES members (id),
            transaction_type    VARCHAR(20)     NOT NULL,
            points              BIGINT          NOT NULL,
            balance_after       BIGINT          NOT NULL,
            rule_id             VARCHAR(64),
            reward_id           UUID            REFERENCES rewards (id),
            redemption_id       BIGINT          REFERENCES redemptions (id),
            reversal_of         VARCHAR(32),
            description         VARCHAR(500),
            idempotency_key     VARCHAR(64),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_ledger_reference_number UNIQUE (reference_number),
            CONSTRAINT ck_ledger_transaction_type CHECK (
                transaction_type IN (
                    'ACCRUAL', 'BONUS', 'ADJUSTMENT',
                    'REDEMPTION', 'REVERSAL'
                )
            ),
            CONSTRAINT ck_ledger_sign CHECK (
                (transaction_type IN ('ACCRUAL', 'BONUS', 'ADJUSTMENT') AND points > 0)
                OR (transaction_type IN ('REDEMPTION', 'REVERSAL') AND points < 0)
            ),
            CONSTRAINT ck_ledger_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_ledger_member_id ON ledger_entries (member_id, id);")
    op.execute("""
        CREATE UNIQUE INDEX uq_ledger_member_idempotency
        ON ledger_entries (member_id, idempotency_key)
        WHERE idempotency_key IS NOT NULL;
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_ledger_reversal_of
        ON ledger_entries (reversal_of)
        WHERE reversal_of IS NOT NULL;
    """)
    op.execute("""
        CREATE TRIGGER trg_ledger_entries_append_only
            BEFORE UPDATE OR DELETE ON ledger_entries
            FOR EACH ROW EXECUTE FUNCTION fn_forbid_mutation();
    """)
    op.execute("COMMENT ON TABLE ledger_entries IS 'Points ledger — Append-Only, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")
