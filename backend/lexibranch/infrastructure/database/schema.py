from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

projects_table = Table(
    "projects",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", Text, nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
    Column("default_language", String(32), nullable=False, default="en"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)
project_members_table = Table(
    "project_members",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "project_id",
        String(32),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", String(64), nullable=False),
    Column("role", String(32), nullable=False, default="developer"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
)
spaces_table = Table(
    "spaces",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "project_id",
        String(32),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("slug", String(255), nullable=False),
    Column("description", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("project_id", "slug", name="uq_spaces_project_slug"),
)
branches_table = Table(
    "branches",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "space_id",
        String(32),
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("slug", String(255), nullable=False),
    Column("is_default", Boolean, nullable=False, default=False),
    Column(
        "source_branch_id",
        String(32),
        ForeignKey("branches.id", ondelete="SET NULL"),
        index=True,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("space_id", "slug", name="uq_branches_space_slug"),
)
translation_keys_table = Table(
    "translation_keys",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "branch_id",
        String(32),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("namespace", Text),
    Column("description", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("branch_id", "name", name="uq_translation_keys_branch_name"),
)
translations_table = Table(
    "translations",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "key_id",
        String(32),
        ForeignKey("translation_keys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("language", String(32), nullable=False),
    # Empty string marks an untranslated value.
    Column("value", Text, nullable=False, default=""),
    Column("status", String(16), nullable=False, default="pending"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("key_id", "language", name="uq_translations_key_language"),
)
environments_table = Table(
    "environments",
    metadata,
    Column("id", String(32), primary_key=True),
    Column(
        "project_id",
        String(32),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("slug", String(255), nullable=False),
    Column(
        "branch_id",
        String(32),
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("project_id", "slug", name="uq_environments_project_slug"),
)

Index("ix_translations_language", translations_table.c.language)
