from __future__ import annotations
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./classroom.db"


def _engine_kwargs(url: str) -> dict:
	if not url.startswith("sqlite"):
		return {}
	kwargs: dict = {"connect_args": {"check_same_thread": False}}
	if url in ("sqlite://", "sqlite:///:memory:"):
		# one shared connection or every session sees an empty database
		kwargs["poolclass"] = StaticPool
	return kwargs


engine = create_engine(DATABASE_URL, future=True, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


def init_db() -> None:
	# create_all only; schema migrations are out of scope
	from . import models  # noqa: F401  registers tables on Base
	Base.metadata.create_all(bind=engine)
