"""
Async engine and session factory.

Per-visit and per-building writes are serialized by the database: on
PostgreSQL through row locks (SELECT ... FOR UPDATE and conditional UPDATE),
on SQLite by opening every transaction with BEGIN IMMEDIATE so that only one
writer holds the database at a time.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession


def _is_sqlite(db_uri: str) -> bool:
    return db_uri.startswith("sqlite")


def _enable_immediate_transactions(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself instead of the driver
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(db_uri: str, busy_timeout: int = 30, echo: bool = False) -> AsyncEngine:
    if _is_sqlite(db_uri):
        engine = create_async_engine(
            db_uri, echo=echo, future=True, connect_args={"timeout": busy_timeout}
        )
        _enable_immediate_transactions(engine)
        return engine

    return create_async_engine(db_uri, echo=echo, future=True, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables for every registered entity"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
