from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from lucky_pool.load_config import database_url


def create_engine(url: str = database_url) -> AsyncEngine:
    """sqlite+aiosqlite for local runs, postgresql+asyncpg in production."""
    if url.startswith("postgresql"):
        return create_async_engine(url, pool_size=20, max_overflow=20)
    return create_async_engine(url, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        bind=engine,
        expire_on_commit=False,
    )


engine = create_engine()

# Centralized session factory; services take it as their default.
Session = create_session_factory(engine)
