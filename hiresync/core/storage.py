"""Database connection and storage utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from hiresync.core.config import settings

if TYPE_CHECKING:
    from hiresync.models.token import Token

engine: AsyncEngine = create_async_engine(
    str(settings.database_url),
    echo=False,
    pool_pre_ping=True,
)

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    import hiresync.models  # noqa: F401  registers mappers on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class TokenStorage:
    """Persistence for the OAuth credentials issued by hh.ru."""

    @staticmethod
    async def save(token_data: dict, session_factory=None) -> Token:
        """Save a new token, replacing any existing ones."""
        from hiresync.models.token import Token

        async with (session_factory or async_session)() as session:
            await session.execute(Token.__table__.delete())
            tok = Token(**token_data)
            session.add(tok)
            await session.commit()
            await session.refresh(tok)
            return tok

    @staticmethod
    async def get_latest(session_factory=None) -> Token | None:
        """Get the most recent token."""
        from sqlalchemy import select

        from hiresync.models.token import Token

        async with (session_factory or async_session)() as session:
            result = await session.execute(
                select(Token).order_by(Token.obtained_at.desc()).limit(1)
            )
            return result.scalar_one_or_none()
