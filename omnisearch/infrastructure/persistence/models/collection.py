"""Collection ORM model. Owned by the primary application; read here for joins."""

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from omnisearch.infrastructure.persistence.database import Base


class Collection(Base):
    """Collection. Table: collection.

    location is the materialized ancestor path ("/", "/3/", "/3/12/").
    personal_owner_id is set only on a user's personal root collection;
    its descendants are personal through location.
    """

    __tablename__ = "collection"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(254), nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False, default="/")
    personal_owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_collection_location", "location"),
        Index("ix_collection_personal_owner_id", "personal_owner_id"),
    )
