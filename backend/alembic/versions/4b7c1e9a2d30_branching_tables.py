"""add projects, spaces, branches, keys and translations

Revision ID: 4b7c1e9a2d30
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4b7c1e9a2d30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("projects"):
        op.create_table(
            "projects",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
            sa.Column(
                "default_language",
                sa.String(length=32),
                nullable=False,
                server_default="en",
            ),
            *_timestamps(),
        )

    if not insp.has_table("project_members"):
        op.create_table(
            "project_members",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "project_id",
                sa.String(length=32),
                sa.ForeignKey("projects.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("user_id", sa.String(length=64), nullable=False),
            sa.Column(
                "role", sa.String(length=32), nullable=False, server_default="developer"
            ),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.UniqueConstraint(
                "project_id", "user_id", name="uq_project_members_project_user"
            ),
        )

    if not insp.has_table("spaces"):
        op.create_table(
            "spaces",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "project_id",
                sa.String(length=32),
                sa.ForeignKey("projects.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("slug", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("project_id", "slug", name="uq_spaces_project_slug"),
        )
        op.create_index("ix_spaces_project_id", "spaces", ["project_id"])

    if not insp.has_table("branches"):
        op.create_table(
            "branches",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "space_id",
                sa.String(length=32),
                sa.ForeignKey("spaces.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("slug", sa.String(length=255), nullable=False),
            sa.Column(
                "is_default", sa.Boolean(), nullable=False, server_default=sa.false()
            ),
            sa.Column(
                "source_branch_id",
                sa.String(length=32),
                sa.ForeignKey("branches.id", ondelete="SET NULL"),
                nullable=True,
            ),
            *_timestamps(),
            sa.UniqueConstraint("space_id", "slug", name="uq_branches_space_slug"),
        )
        op.create_index("ix_branches_space_id", "branches", ["space_id"])
        op.create_index("ix_branches_source_branch_id", "branches", ["source_branch_id"])

    if not insp.has_table("translation_keys"):
        op.create_table(
            "translation_keys",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "branch_id",
                sa.String(length=32),
                sa.ForeignKey("branches.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("namespace", sa.Text(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint(
                "branch_id", "name", name="uq_translation_keys_branch_name"
            ),
        )
        op.create_index(
            "ix_translation_keys_branch_id", "translation_keys", ["branch_id"]
        )

    if not insp.has_table("translations"):
        op.create_table(
            "translations",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "key_id",
                sa.String(length=32),
                sa.ForeignKey("translation_keys.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("language", sa.String(length=32), nullable=False),
            sa.Column("value", sa.Text(), nullable=False, server_default=""),
            sa.Column(
                "status", sa.String(length=16), nullable=False, server_default="pending"
            ),
            *_timestamps(),
            sa.UniqueConstraint("key_id", "language", name="uq_translations_key_language"),
        )
        op.create_index("ix_translations_key_id", "translations", ["key_id"])
        op.create_index("ix_translations_language", "translations", ["language"])

    if not insp.has_table("environments"):
        op.create_table(
            "environments",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column(
                "project_id",
                sa.String(length=32),
                sa.ForeignKey("projects.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("slug", sa.String(length=255), nullable=False),
            sa.Column(
                "branch_id",
                sa.String(length=32),
                sa.ForeignKey("branches.id", ondelete="RESTRICT"),
                nullable=False,
            ),
            *_timestamps(),
            sa.UniqueConstraint("project_id", "slug", name="uq_environments_project_slug"),
        )
        op.create_index("ix_environments_branch_id", "environments", ["branch_id"])


def downgrade() -> None:
    op.drop_index("ix_environments_branch_id", table_name="environments")
    op.drop_table("environments")

    op.drop_index("ix_translations_language", table_name="translations")
    op.drop_index("ix_translations_key_id", table_name="translations")
    op.drop_table("translations")

    op.drop_index("ix_translation_keys_branch_id", table_name="translation_keys")
    op.drop_table("translation_keys")

    op.drop_index("ix_branches_source_branch_id", table_name="branches")
    op.drop_index("ix_branches_space_id", table_name="branches")
    op.drop_table("branches")

    op.drop_index("ix_spaces_project_id", table_name="spaces")
    op.drop_table("spaces")

    op.drop_table("project_members")
    op.drop_table("projects")
