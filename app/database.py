"""Database engine, session factory and declarative base"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import settings

Base = declarative_base()


def configure_sqlite(engine: AsyncEngine) -> AsyncEngine:
    """Take the SQLite write lock at BEGIN instead of at the first write.

    pysqlite/aiosqlite open transactions lazily, which lets two writers
    each hold a read lock and then deadlock on upgrade. Emitting
    BEGIN IMMEDIATE makes concurrent transactions queue on the database
    lock for the whole unit of work.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for the given URL"""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"timeout": 30})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return configure_sqlite(create_async_engine(url, **kwargs))


engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency yielding a database session"""
    async with SessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker:
    """FastAPI dependency for handlers that open their own short-lived sessions.

    Long-lived responses such as event streams must not hold a request-scoped
    session, which would only be released when the response ends.
    """
    return SessionLocal
