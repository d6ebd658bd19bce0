from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings

IN_MEMORY_SQLITE_URL = "sqlite+aiosqlite:///:memory:"


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    Hace que cada transacción SQLite tome el lock de escritura al empezar.

    SQLite ignora FOR UPDATE; la verificación de solapamiento y el insert
    de un booking quedan serializados por este lock.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url or IN_MEMORY_SQLITE_URL
    if url.startswith("sqlite"):
        if ":memory:" in url:
            # Una sola conexión compartida para que :memory: sobreviva entre sesiones
            return create_async_engine(
                url,
                echo=settings.sql_echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        engine = create_async_engine(
            url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False},
        )
        use_immediate_transactions(engine)
        return engine
    return create_async_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
