from typing import Generator

from sqlalchemy.orm import Session

from shared.database import SessionLocal
from services.entity_store import EntityStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session) -> EntityStore:
    return EntityStore(db)
