"""Search index table (Core Table, not ORM).

The lifecycle creates the same table under several names (active,
pending, retired), so the schema is built by a factory. Rows are written
by the ingestion collaborator; this package only reads them.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TSVECTOR

from omnisearch.core.constants import INDEX_TABLE_ACTIVE
from omnisearch.infrastructure.persistence.database import Base


def build_search_index_table(
    name: str, metadata: MetaData, index_suffix: str | None = None
) -> Table:
    """Return the search index schema under the given table name.

    (model, model_id) is the primary key, so joins on it never fan out.
    Postgres index names are schema-wide and survive table renames, so
    tables created for a swap pass a unique index_suffix.
    """
    tag = f"{name}_{index_suffix}" if index_suffix else name
    return Table(
        name,
        metadata,
        Column("model", String(64), nullable=False),
        Column("model_id", String(254), nullable=False),
        Column("model_rank", Integer, nullable=False),
        Column("name", Text, nullable=True),
        Column("searchable_text", Text, nullable=True),
        Column("search_vector", TSVECTOR, nullable=False),
        # JSON text of the entity's legacy projection; decoded on output.
        Column("legacy_input", Text, nullable=False),
        Column("collection_id", Integer, nullable=True),
        Column("database_id", Integer, nullable=True),
        Column("archived", Boolean, nullable=False, default=False),
        Column("pinned", Boolean, nullable=False, default=False),
        Column("verified", Boolean, nullable=False, default=False),
        Column("dashboardcard_count", Integer, nullable=True),
        Column("creator_id", Integer, nullable=True),
        Column("last_editor_id", Integer, nullable=True),
        Column("created_at", DateTime(timezone=True), nullable=True),
        Column("updated_at", DateTime(timezone=True), nullable=True),
        Column("last_edited_at", DateTime(timezone=True), nullable=True),
        PrimaryKeyConstraint("model", "model_id", name=f"pk_{tag}"),
        Index(f"ix_{tag}_search_vector", "search_vector", postgresql_using="gin"),
        Index(f"ix_{tag}_collection_id", "collection_id"),
    )


search_index: Table = build_search_index_table(INDEX_TABLE_ACTIVE, Base.metadata)
