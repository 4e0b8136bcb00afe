"""Create player rating, parameter set and rating history tables

Revision ID: 5d1e8c3a9b20
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "5d1e8c3a9b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def upgrade() -> None:
    op.create_table(
        "player_rating_states",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_ref", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=True),
        sa.Column("pmr", sa.Float(), nullable=False),
        sa.Column("reliability", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rated_matches", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("player_ref"),
    )

    op.create_table(
        "rating_parameter_sets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("params", JSON_TYPE, nullable=False),
        sa.Column("source", sa.String(length=30), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("idx_rating_parameter_sets_active", "rating_parameter_sets", ["is_active"])

    op.create_table(
        "rated_matches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_ref", sa.String(length=64), nullable=False),
        sa.Column("team1_player_refs", JSON_TYPE, nullable=False),
        sa.Column("team2_player_refs", JSON_TYPE, nullable=False),
        sa.Column("sets", JSON_TYPE, nullable=False),
        sa.Column("params_version", sa.String(length=100), nullable=False),
        sa.Column("applied", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("processed_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("match_ref"),
    )

    op.create_table(
        "player_rating_changes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("rated_match_id", sa.Integer(), nullable=False),
        sa.Column("player_ref", sa.String(length=64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("previous_pmr", sa.Float(), nullable=False),
        sa.Column("new_pmr", sa.Float(), nullable=False),
        sa.Column("previous_reliability", sa.Float(), nullable=False),
        sa.Column("new_reliability", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["rated_match_id"], ["rated_matches.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_player_rating_changes_player_ref", "player_rating_changes", ["player_ref"])


def downgrade() -> None:
    op.drop_index("ix_player_rating_changes_player_ref", table_name="player_rating_changes")
    op.drop_table("player_rating_changes")
    op.drop_table("rated_matches")
    op.drop_index("idx_rating_parameter_sets_active", table_name="rating_parameter_sets")
    op.drop_table("rating_parameter_sets")
    op.drop_table("player_rating_states")
