"""Collection permission predicates (implements IPermissionProvider).

Permission paths follow the collection permission scheme:

- ``/``                      everything
- ``/collection/<id>/``      read-write on one collection
- ``/collection/<id>/read/`` read-only on one collection
- ``/collection/root/``      the root collection (items without a collection)

Other paths (data permissions, namespaced collections) do not grant
collection access and are ignored. A collection path that cannot be
parsed raises PermissionClauseException: predicates fail closed.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    ColumnElement,
    Select,
    String,
    Table,
    cast,
    exists,
    false,
    func,
    or_,
    select,
    true,
)

from omnisearch.domain.enums import PersonalCollectionFilter
from omnisearch.domain.exceptions import PermissionClauseException
from omnisearch.infrastructure.persistence.models.collection import Collection

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import IdentityContext, SearchContext

_COLLECTION_PREFIX = "/collection/"
_NAMESPACED_PREFIX = "/collection/namespace/"
_COLLECTION_PATH_RE = re.compile(r"^/collection/([^/]+)/(?:read/)?$")


def readable_collections(perms: frozenset[str]) -> tuple[frozenset[int], bool]:
    """Return (readable collection ids, whether the root collection is readable).

    Raises:
        PermissionClauseException: A /collection/ path is malformed.
    """
    ids: set[int] = set()
    root = False
    for path in perms:
        if not path.startswith(_COLLECTION_PREFIX) or path.startswith(_NAMESPACED_PREFIX):
            continue
        match = _COLLECTION_PATH_RE.match(path)
        if match is None:
            raise PermissionClauseException("Malformed collection permission path", path)
        target = match.group(1)
        if target == "root":
            root = True
            continue
        try:
            ids.add(int(target))
        except ValueError as e:
            raise PermissionClauseException(
                "Malformed collection id in permission path", path
            ) from e
    return frozenset(ids), root


class CollectionPermissionProvider:
    """Builds predicates restricting a collection id column to readable collections."""

    def __init__(self, collection_table: Table = Collection.__table__) -> None:
        self.collection_table = collection_table

    def permitted_clause(
        self, identity: IdentityContext, column: ColumnElement[Any]
    ) -> ColumnElement[bool]:
        """Predicate true exactly for readable collections.

        Unrestricted identities get a literal true so the clause stays in the
        query (composable with joins) without restricting it.
        """
        if identity.is_unrestricted:
            return true()
        ids, root = readable_collections(identity.current_user_perms)
        clauses: list[ColumnElement[bool]] = []
        if ids:
            clauses.append(column.in_(sorted(ids)))
        if root:
            clauses.append(column.is_(None))
        if not clauses:
            return false()
        return or_(*clauses)

    def personal_clause(
        self,
        ctx: SearchContext,
        identity: IdentityContext,
        column: ColumnElement[Any],
    ) -> ColumnElement[bool] | None:
        """Extra restriction from ctx.filters.personal_collections, or None."""
        mode = ctx.filters.personal_collections
        if mode is None:
            return None
        if mode == PersonalCollectionFilter.ONLY:
            return column.in_(self._personal_collection_ids())
        if mode == PersonalCollectionFilter.ONLY_MINE:
            if identity.current_user_id is None:
                raise PermissionClauseException(
                    "Filtering on own personal collection requires a current user"
                )
            return column.in_(self._personal_collection_ids(identity.current_user_id))
        if mode == PersonalCollectionFilter.EXCLUDE:
            return or_(column.is_(None), column.not_in(self._personal_collection_ids()))
        raise PermissionClauseException(f"Unknown personal collections filter: {mode!r}")

    def _personal_collection_ids(self, owner_id: int | None = None) -> Select:
        """SELECT ids of personal root collections and their descendants."""
        c = self.collection_table.alias("pc")
        root = self.collection_table.alias("pc_root")
        if owner_id is None:
            owns = c.c.personal_owner_id.is_not(None)
            root_owns = root.c.personal_owner_id.is_not(None)
        else:
            owns = c.c.personal_owner_id == owner_id
            root_owns = root.c.personal_owner_id == owner_id
        under_personal_root = exists().where(
            root_owns,
            c.c.location.like(func.concat("/", cast(root.c.id, String), "/%")),
        )
        return select(c.c.id).where(or_(owns, under_personal_root))
