"""001: create accounts table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ids are generated by the application; updated_at is stamped by the
    # application on every change except the insert, so no trigger here
    op.execute("""
        CREATE TABLE accounts (
            id            UUID         PRIMARY KEY,
            holder_name   VARCHAR(200) NOT NULL,
            tax_id        CHAR(11)     NOT NULL,
            email         VARCHAR(320),
            active        BOOLEAN      NOT NULL DEFAULT FALSE,
            created_at    TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at    TIMESTAMPTZ,
            deleted_at    TIMESTAMPTZ,
            version       BIGINT       NOT NULL DEFAULT 0,
            CONSTRAINT ck_accounts_holder_name_not_blank CHECK (length(holder_name) > 0)
        );
    """)
    # tax_id is a lookup key, deliberately not UNIQUE
    op.execute("CREATE INDEX ix_accounts_tax_id ON accounts (tax_id);")
    op.execute("CREATE INDEX ix_accounts_created_at ON accounts (created_at);")
    op.execute(
        "CREATE INDEX ix_accounts_deleted_at ON accounts (deleted_at) "
        "WHERE deleted_at IS NOT NULL;"
    )
    op.execute("COMMENT ON TABLE accounts IS 'Contas de clientes; soft delete via deleted_at';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
