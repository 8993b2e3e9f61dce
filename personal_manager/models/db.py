from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from personal_manager.core.config import settings


class Base(DeclarativeBase):
    pass


def _engine_kwargs() -> dict:
    kwargs: dict = {"echo": settings.SQLALCHEMY_ECHO}
    if settings.DB_IS_SQLITE:
        kwargs["connect_args"] = {"check_same_thread": False}
    if not settings.DB_IS_MEMORY:
        # Hard ceiling on concurrent connections; extra requests wait in the pool queue
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=not settings.DB_IS_SQLITE,
        )
    return kwargs


engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs())
SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as db:
        yield db


async def init_store(bind: Optional[AsyncEngine] = None) -> None:
    """Create missing tables and seed the default login account."""
    from personal_manager.models import entities  # noqa: F401  ensure models are registered
    from personal_manager.utils.bootstrap import ensure_default_user

    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = SessionLocal if bind is engine else async_sessionmaker(bind=bind, expire_on_commit=False)
    async with factory() as db:
        await ensure_default_user(db)
