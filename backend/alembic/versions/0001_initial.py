from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "uq_player_email_lower",
        "player",
        [sa.text("lower(email)")],
        unique=True,
    )
    op.create_table(
        "versus",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("reverse_ranking", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by",
            sa.String(),
            sa.ForeignKey("player.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_versus_created_by", "versus", ["created_by"])
    op.create_table(
        "versus_player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "versus_id",
            sa.String(),
            sa.ForeignKey("versus.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "player_id",
            sa.String(),
            sa.ForeignKey("player.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_commissioner", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("nickname", sa.String(length=50), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint(
            "versus_id", "player_id", name="uq_versus_player_versus_id_player_id"
        ),
    )
    op.create_index("ix_versus_player_player_id", "versus_player", ["player_id"])
    op.create_table(
        "objective",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "versus_id",
            sa.String(),
            sa.ForeignKey("versus.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_objective_versus_id", "objective", ["versus_id"])
    op.create_table(
        "completion",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "versus_id",
            sa.String(),
            sa.ForeignKey("versus.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "player_id",
            sa.String(),
            sa.ForeignKey("player.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "objective_id",
            sa.String(),
            sa.ForeignKey("objective.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "ix_completion_versus_id_player_id", "completion", ["versus_id", "player_id"]
    )
    op.create_index("ix_completion_objective_id", "completion", ["objective_id"])


def downgrade():
    op.drop_index("ix_completion_objective_id", table_name="completion")
    op.drop_index("ix_completion_versus_id_player_id", table_name="completion")
    op.drop_table("completion")
    op.drop_index("ix_objective_versus_id", table_name="objective")
    op.drop_table("objective")
    op.drop_index("ix_versus_player_player_id", table_name="versus_player")
    op.drop_table("versus_player")
    op.drop_index("ix_versus_created_by", table_name="versus")
    op.drop_table("versus")
    op.drop_index("uq_player_email_lower", table_name="player")
    op.drop_table("player")
