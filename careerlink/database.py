# database.py
import json
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from careerlink.config import build_sqlalchemy_db_url, settings


logger = logging.getLogger(__name__)


def _build_connect_args() -> dict:
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def mask_db_url(db_url: str) -> str:
    try:
        return str(make_url(db_url).set(password="***"))
    except Exception:
        return db_url


_db_url = build_sqlalchemy_db_url(settings)
# JSON list columns are stored unescaped so they can be matched with LIKE.
engine = create_engine(
    _db_url,
    pool_pre_ping=True,
    future=True,
    connect_args=_build_connect_args(),
    json_serializer=lambda obj: json.dumps(obj, ensure_ascii=False),
)
logger.info("SQLAlchemy ORM db_url=%s", mask_db_url(_db_url))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
