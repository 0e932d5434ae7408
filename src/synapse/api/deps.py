"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. This provides:

* A stable import surface (refactors in lower layers don't ripple up)
* Easier test overrides via ``app.dependency_overrides[deps.get_db]``
* A single location for cross-cutting request checks such as ownership

Add new dependency callables here as the API grows.
"""
import uuid
from fastapi import HTTPException, status

from synapse.db.session import get_db
from synapse.core.auth import get_current_user
from synapse.models.user import User


def ensure_caller(current_user: User | None, *allowed_ids: uuid.UUID | None) -> None:
    """Ownership check: the authenticated caller must be one of ``allowed_ids``.

    ``current_user`` is None only when authentication is disabled, in which
    case there is nobody to check against.
    """
    if current_user is None:
        return
    if current_user.id not in allowed_ids:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Access Denied")


__all__ = ["get_db", "get_current_user", "ensure_caller"]
