from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import DateTime, TypeDecorator

from shared.config import settings


def build_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are handed to FastAPI's worker threads.
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = build_engine(settings.SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timestamp stored as UTC and always loaded back timezone-aware.

    SQLite keeps no offset, so naive values read from it are UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# Signed 64-bit range of an INTEGER primary key.
MAX_ID = 2 ** 63 - 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def storable_id(value: int) -> bool:
    """Whether the id fits an INTEGER column; larger ids cannot name a stored row."""
    return -MAX_ID - 1 <= value <= MAX_ID


def create_tables(bind=None) -> None:
    # noinspection PyUnresolvedReferences
    import members.models  # noqa: F401
    # noinspection PyUnresolvedReferences
    import teams.models  # noqa: F401
    # noinspection PyUnresolvedReferences
    import feedback.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
