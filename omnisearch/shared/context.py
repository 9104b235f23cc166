"""Request context management using contextvars.

Provides thread-safe, async-safe storage for the identity of the caller
that issued the current request. Nothing in the search pipeline reads it
implicitly: pass get_current_identity to SearchService as its ambient
identity provider.

Usage:
    set_current_identity(user_id=42, is_superuser=False, perms={"/collection/3/"})
    identity = get_current_identity()
"""

from collections.abc import Iterable
from contextvars import ContextVar

from omnisearch.application.dtos.search import IdentityContext

_current_identity: ContextVar[IdentityContext | None] = ContextVar(
    "current_identity", default=None
)


def set_current_identity(
    user_id: int,
    is_superuser: bool = False,
    perms: Iterable[str] = (),
) -> None:
    """Set the caller identity for this request.

    Call in middleware or dependency injection after authentication.
    Context is scoped to the current async task/thread.

    Args:
        user_id: Authenticated user ID.
        is_superuser: Whether the user bypasses collection permissions.
        perms: Permission paths (e.g. "/collection/3/") granted to the user.

    Raises:
        ValueError: If user_id is None.
    """
    if user_id is None:
        raise ValueError("user_id is required to set a request identity")
    _current_identity.set(
        IdentityContext(
            is_superuser=is_superuser,
            current_user_id=user_id,
            current_user_perms=frozenset(perms),
        )
    )


def clear_current_identity() -> None:
    """Clear the caller identity."""
    _current_identity.set(None)


def get_current_identity() -> IdentityContext | None:
    """Return the current request identity, or None outside a request."""
    return _current_identity.get()
