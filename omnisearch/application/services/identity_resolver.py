"""Resolve the effective caller identity for a search call."""

from __future__ import annotations

from typing import TYPE_CHECKING

from omnisearch.application.dtos.search import IdentityContext

if TYPE_CHECKING:
    from omnisearch.application.interfaces.services import AmbientIdentity


def resolve_identity(
    explicit: IdentityContext | None,
    ambient: AmbientIdentity | None = None,
) -> IdentityContext:
    """Return the identity a search runs as. Total; never raises.

    1. An explicit identity with a current_user_id is returned verbatim.
    2. Otherwise the ambient provider's identity, when it has a user id.
    3. Otherwise the unrestricted identity used by internal callers.
    """
    if explicit is not None and explicit.current_user_id is not None:
        return explicit
    if ambient is not None:
        current = ambient()
        if current is not None and current.current_user_id is not None:
            return current
    return IdentityContext.unrestricted()
