"""SQLAlchemy models for the epoxy mix log."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from epoxymix.settings import AppSettings

DATABASE_URL = AppSettings.get_config().database_url

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
# In-memory SQLite must share one connection or every session sees an empty DB
pool_args = {"poolclass": StaticPool} if DATABASE_URL in ("sqlite://", "sqlite:///:memory:") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True, **pool_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


class EpoxyMixModel(Base):
    """
    One mix submission.

    Check kinds are stored as mutually exclusive "Yes" flag columns; the
    service layer converts them to a single CheckKind.
    """
    __tablename__ = "epoxy_mix"

    uuid = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    timestamp = Column(String, index=True, nullable=True)
    employee = Column(Integer, nullable=True)
    part_a = Column(String, nullable=True)
    part_b = Column(String, nullable=True)
    cup_a = Column(String, nullable=True)
    cup_b = Column(String, nullable=True)
    ratio = Column(String, nullable=True)
    startup = Column(String, nullable=True)
    daily_check = Column(String, nullable=True)
    shutdown = Column(String, nullable=True)
    ratio_only = Column(String, nullable=True)
    comments = Column(Text, nullable=True)
