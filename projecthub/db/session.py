import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from projecthub.config import settings

class Base(DeclarativeBase):
    pass

def normalize_url(url: str) -> str:
    # SQLAlchemy no longer accepts the postgres:// alias
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url

url = normalize_url(settings.database_url)

connect_args = {}
if url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    url,
    connect_args=connect_args,
    pool_pre_ping=True,
    future=True,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)

@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # projects -> project_documents cascade relies on FK enforcement
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db():
    from projecthub.models import user, project, document  # noqa: F401
    from projecthub.auth.service import ensure_default_faculty
    from projecthub.core.logger import logger

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")

    db = SessionLocal()
    try:
        ensure_default_faculty(db)
    finally:
        db.close()
