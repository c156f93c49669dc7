"""news archive and news tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa

from newsdesk.core.config import settings

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        settings.archive_table,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("jump_to", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        settings.news_table,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "pid",
            sa.Integer(),
            sa.ForeignKey(f"{settings.archive_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("alias", sa.String(length=128), nullable=True),
        sa.Column("headline", sa.String(length=255), nullable=False),
        sa.Column("teaser", sa.Text(), nullable=True),
        sa.Column("url", sa.String(length=255), nullable=True),
        sa.Column("date", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "source",
            sa.Enum("default", "internal", "article", "external", name="news_source"),
            nullable=False,
            server_default="default",
        ),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("start", sa.Integer(), nullable=True),
        sa.Column("stop", sa.Integer(), nullable=True),
    )
    op.create_index(
        f"ix_{settings.news_table}_pid", settings.news_table, ["pid"]
    )
    op.create_index(
        f"ix_{settings.news_table}_alias", settings.news_table, ["alias"], unique=True
    )
    op.create_index(
        f"ix_{settings.news_table}_date", settings.news_table, ["date"]
    )


def downgrade() -> None:
    op.drop_index(f"ix_{settings.news_table}_date", table_name=settings.news_table)
    op.drop_index(f"ix_{settings.news_table}_alias", table_name=settings.news_table)
    op.drop_index(f"ix_{settings.news_table}_pid", table_name=settings.news_table)
    op.drop_table(settings.news_table)
    op.drop_table(settings.archive_table)
    sa.Enum(name="news_source").drop(op.get_bind(), checkfirst=True)
