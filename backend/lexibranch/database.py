from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lexibranch.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ANN001
    # SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(dsn: str, *, echo: bool = False) -> Engine:
    options: dict = {"future": True, "echo": echo}
    if dsn.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in dsn or dsn.rstrip("/").endswith(("sqlite:", "pysqlite:")):
            options["poolclass"] = StaticPool
    engine = create_engine(dsn, **options)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, expire_on_commit=False, class_=Session)


engine = build_engine(settings.database_dsn, echo=settings.database_echo)
SessionLocal = build_session_factory(engine)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    Unit of work: everything executed on the yielded session is committed
    together when the block exits cleanly and rolled back on any exception.
    """
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
