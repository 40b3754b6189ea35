from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from ..config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # single-file deployments; wait on the write lock instead of failing fast
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    # dropped connections are replaced before use rather than failing a reservation
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.sqlalchemy_url, future=True, echo=False, **_engine_options(settings.sqlalchemy_url)
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
Base = declarative_base()


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
