# personal_manager/utils/bootstrap.py
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.config import settings
from personal_manager.models.entities import User

log = logging.getLogger(__name__)


async def ensure_default_user(db: AsyncSession) -> User:
    """
    Idempotent seeding of the login account configured through
    DEFAULT_USERNAME / DEFAULT_PASSWORD / DEFAULT_EMAIL.

    An existing row is left untouched, so a password changed directly in the
    database survives restarts.
    """
    user = await db.scalar(select(User).where(User.username == settings.DEFAULT_USERNAME))
    if user is not None:
        return user

    user = User(
        username=settings.DEFAULT_USERNAME,
        password=settings.DEFAULT_PASSWORD,
        email=settings.DEFAULT_EMAIL or None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    log.info("[bootstrap] created default user %r (id=%s)", user.username, user.id)
    return user
