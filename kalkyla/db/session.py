"""
Async database session management.
Challenge: One engine shared by API requests, Celery tasks and CLI scripts.
Design: Request-scoped sessions via dependency injection; session_scope() for code outside FastAPI.
Side effects that must not outlive a rollback (webhooks) are queued with run_after_commit().
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any, Callable

from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session

from kalkyla.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


AFTER_COMMIT_KEY = "after_commit_callbacks"


def run_after_commit(session: AsyncSession, callback: Callable[..., Any], *args: Any) -> None:
    """Call callback(*args) once the current transaction commits; dropped on rollback."""
    session.info.setdefault(AFTER_COMMIT_KEY, []).append((callback, args))


@event.listens_for(Session, "after_commit")
def _run_after_commit_callbacks(session: Session) -> None:
    for callback, args in session.info.pop(AFTER_COMMIT_KEY, []):
        callback(*args)


@event.listens_for(Session, "after_rollback")
def _drop_after_commit_callbacks(session: Session) -> None:
    session.info.pop(AFTER_COMMIT_KEY, None)


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Transactional session for background tasks and scripts."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request. Commit on success, rollback on error."""
    async with session_scope() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]
