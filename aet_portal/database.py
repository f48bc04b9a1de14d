"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL in production; SQLite URLs are accepted for
local runs and tests. All models are auto-imported in create_tables() so
every table is created in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from aet_portal.config import settings


def _engine_kwargs() -> dict:
    if not settings.is_sqlite:
        return {
            "pool_pre_ping": True,   # Auto-reconnect if DB connection drops
            "pool_size": 10,
            "max_overflow": 20,
        }
    kwargs = {"connect_args": {"check_same_thread": False}}
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees an empty DB
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,                  # Set True to log all SQL queries (debug only)
    **_engine_kwargs(),
)

if settings.is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from aet_portal.models.user import User          # noqa
    from aet_portal.models.vehicle import Vehicle    # noqa
    from aet_portal.models.license import License    # noqa
    from aet_portal.models.activity import Activity  # noqa

    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drops every table. Used by the test suite between tests."""
    import aet_portal.models  # noqa

    Base.metadata.drop_all(bind=engine)
