"""
Database configuration and session management.

Uses SQLAlchemy 2.x style with DeclarativeBase.
"""
from sqlalchemy import create_engine, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import get_settings

settings = get_settings()

# Get database URL with priority: DATABASE_URL > PG* vars > docker-compose > SQLite
database_url = settings.sqlalchemy_database_uri

# Connection arguments for SQLite
connect_args = {}
if database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    database_url,
    pool_pre_ping=True if not database_url.startswith("sqlite") else False,
    echo=settings.DEBUG,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dialect_name(db: Session) -> str:
    """Name of the SQL dialect the session is bound to ("postgresql", "sqlite", ...)."""
    return db.get_bind().dialect.name


def insert_ignoring_conflicts(db: Session, model, **values):
    """
    Build a single INSERT that silently does nothing when it violates a unique key.

    Postgres and SQLite both support ON CONFLICT DO NOTHING, which keeps
    "create if missing" to one atomic statement instead of read-then-insert.
    """
    name = dialect_name(db)
    if name == "postgresql":
        return postgresql.insert(model).values(**values).on_conflict_do_nothing()
    if name == "sqlite":
        return sqlite.insert(model).values(**values).on_conflict_do_nothing()
    # MySQL / MariaDB
    return insert(model).values(**values).prefix_with("IGNORE")
