"""
SQLite storage for teams, players and saved seasons
"""
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from diamond.config import settings


def make_engine(path: str = settings.DATABASE_PATH, **kwargs) -> Engine:
    """SQLite engine with foreign keys enforced, so deleting a team removes its players"""
    url = "sqlite://" if path == ":memory:" else f"sqlite:///{path}"
    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    sqlite_engine = create_engine(url, echo=False, connect_args=connect_args, **kwargs)

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = make_engine()
SessionLocal = sessionmaker(bind=engine)


class Base(DeclarativeBase):
    pass


def init_db(bind: Engine = engine):
    """Create the team, player and season tables"""
    from diamond.models import player, team, season  # noqa
    Base.metadata.create_all(bind=bind)


def get_session():
    """Get a database session - for direct use (caller must close)"""
    return SessionLocal()


@contextmanager
def session_scope(factory=None):
    """Session that commits on success and rolls back on error"""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """FastAPI dependency - one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
