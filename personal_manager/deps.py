# personal_manager/deps.py
# Role: request-scoped dependencies shared by every router.
#       The owner id is resolved here, at the HTTP boundary, and passed
#       explicitly into services from then on.

from fastapi import Request

from personal_manager.core.config import settings
from personal_manager.models.db import get_db  # noqa: F401  re-exported for routers and test overrides


def get_owner_id(request: Request) -> int:
    """
    Owner of the current request: the logged-in session user, or the
    configured default owner when nobody is logged in.

    Typical usage in routes:
        owner_id: int = Depends(get_owner_id)
    """
    user = request.session.get("user") or {}
    return int(user.get("id") or settings.DEFAULT_OWNER_ID)
