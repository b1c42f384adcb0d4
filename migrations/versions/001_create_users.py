"""Add users table with soft-delete aware uniqueness."""

from typing import Sequence
from typing import Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_create_users"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_ROWS = sa.text("deleted_at IS NULL")


def upgrade() -> None:
    """Create the users table and partial unique indexes over active rows."""
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )

    op.create_index(
        "uq_users_name_active",
        "users",
        ["name"],
        unique=True,
        postgresql_where=ACTIVE_ROWS,
        sqlite_where=ACTIVE_ROWS,
    )
    op.create_index(
        "uq_users_email_active",
        "users",
        ["email"],
        unique=True,
        postgresql_where=ACTIVE_ROWS,
        sqlite_where=ACTIVE_ROWS,
    )


def downgrade() -> None:
    """Drop the users table and its indexes."""
    op.drop_index("uq_users_email_active", table_name="users")
    op.drop_index("uq_users_name_active", table_name="users")
    op.drop_table("users")
