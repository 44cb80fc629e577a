"""create rounds and tickets

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID_TYPE = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
INT_LIST_TYPE = sa.JSON(none_as_null=True).with_variant(
    postgresql.ARRAY(sa.Integer()), "postgresql"
)


def upgrade() -> None:
    op.create_table(
        "rounds",
        sa.Column("id", ID_TYPE, autoincrement=True, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("drawn_numbers", INT_LIST_TYPE, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rounds")),
    )
    op.create_index(
        "uq_rounds_single_active",
        "rounds",
        ["is_active"],
        unique=True,
        sqlite_where=sa.text("is_active"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "tickets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("round_id", ID_TYPE, nullable=False),
        sa.Column("national_id", sa.String(length=20), nullable=False),
        sa.Column("numbers", INT_LIST_TYPE, nullable=False),
        sa.Column("user_sub", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["round_id"],
            ["rounds.id"],
            name=op.f("fk_tickets_round_id_rounds"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tickets")),
    )
    op.create_index(op.f("ix_tickets_round_id"), "tickets", ["round_id"], unique=False)
    op.create_index(op.f("ix_tickets_user_sub"), "tickets", ["user_sub"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_tickets_user_sub"), table_name="tickets")
    op.drop_index(op.f("ix_tickets_round_id"), table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("uq_rounds_single_active", table_name="rounds")
    op.drop_table("rounds")
