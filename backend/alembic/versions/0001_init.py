from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

# exact integers as decimal strings, see app.db.types.UInt
UINT = sa.String(length=80)

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "role_grants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("identity", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint("identity", "role", name="uq_role_grants_identity_role"),
    )
    op.create_index("ix_role_grants_identity", "role_grants", ["identity"])

    op.create_table(
        "ledger_state",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("global_rate", UINT, nullable=False),
        sa.Column("total_supply", UINT, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        "holder_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("holder", sa.String(length=64), nullable=False),
        sa.Column("principal", UINT, nullable=False, server_default="0"),
        sa.Column("rate", UINT, nullable=False, server_default="0"),
        sa.Column("last_settled", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index("ix_holder_accounts_holder", "holder_accounts", ["holder"], unique=True)

    op.create_table(
        "vault_state",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("held_assets", UINT, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        "ledger_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("holder", sa.String(length=64), nullable=True),
        sa.Column("counterparty", sa.String(length=64), nullable=True),
        sa.Column("amount", UINT, nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
    )
    op.create_index("ix_ledger_events_created_at", "ledger_events", ["created_at"])
    op.create_index("ix_ledger_events_kind", "ledger_events", ["kind"])
    op.create_index("ix_ledger_events_holder", "ledger_events", ["holder"])
    op.create_index("ix_ledger_events_counterparty", "ledger_events", ["counterparty"])
    op.create_index("ix_ledger_events_kind_holder", "ledger_events", ["kind", "holder"])


def downgrade():
    op.drop_index("ix_ledger_events_kind_holder", table_name="ledger_events")
    op.drop_index("ix_ledger_events_counterparty", table_name="ledger_events")
    op.drop_index("ix_ledger_events_holder", table_name="ledger_events")
    op.drop_index("ix_ledger_events_kind", table_name="ledger_events")
    op.drop_index("ix_ledger_events_created_at", table_name="ledger_events")
    op.drop_table("ledger_events")

    op.drop_table("vault_state")

    op.drop_index("ix_holder_accounts_holder", table_name="holder_accounts")
    op.drop_table("holder_accounts")

    op.drop_table("ledger_state")

    op.drop_index("ix_role_grants_identity", table_name="role_grants")
    op.drop_table("role_grants")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
