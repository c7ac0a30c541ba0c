from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool
from app.core.config import settings


def _connect_args() -> dict:
    """Per-statement timeouts so no store call blocks indefinitely."""
    if settings.is_sqlite:
        return {
            "check_same_thread": False,
            "timeout": max(settings.DB_STATEMENT_TIMEOUT_MS / 1000, 1),
        }
    if settings.DATABASE_URL.startswith("postgresql"):
        return {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    poolclass=QueuePool,
    pool_size=20,
    max_overflow=10,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=3600,
    pool_pre_ping=True,
    connect_args=_connect_args(),
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database session generator for FastAPI dependency injection"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
