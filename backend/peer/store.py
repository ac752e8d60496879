"""Persistence behind the create / find / distinct-values capability set."""
import logging
from typing import List, Literal, Protocol

from sqlalchemy import select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from peer.database import Base, build_engine, build_session_factory
from peer.errors import StoreError
from peer.models import Reading
from peer.schemas.query import QueryFilter
from peer.schemas.reading import to_utc

logger = logging.getLogger("peer.store")

Order = Literal["desc", "asc", "none"]


class ReadingStore(Protocol):
    def create(self, reading: Reading) -> None: ...

    def find(self, query_filter: QueryFilter, order: Order = "desc") -> List[Reading]: ...

    def distinct_device_ids(self) -> List[str]: ...


def _store_error(exc: SQLAlchemyError) -> StoreError:
    orig = getattr(exc, "orig", None)
    return StoreError(str(orig) if orig is not None else str(exc))


class SqlReadingStore:
    """SQLAlchemy-backed store; every call is one session and one round trip."""

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None):
        self.engine = engine
        self.session_factory = session_factory or build_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlReadingStore":
        return cls(build_engine(database_url))

    def init_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()

    def create(self, reading: Reading) -> None:
        with self.session_factory() as session:
            try:
                session.add(reading)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("insert of reading %s failed", reading.id)
                raise _store_error(exc) from exc

    def find(self, query_filter: QueryFilter, order: Order = "desc") -> List[Reading]:
        stmt = select(Reading)
        if query_filter.device_id is not None:
            stmt = stmt.where(Reading.device_id == query_filter.device_id)
        if query_filter.start_time is not None:
            stmt = stmt.where(Reading.created_at >= to_utc(query_filter.start_time))
        if query_filter.end_time is not None:
            stmt = stmt.where(Reading.created_at <= to_utc(query_filter.end_time))

        if order == "desc":
            stmt = stmt.order_by(Reading.created_at.desc())
        elif order == "asc":
            stmt = stmt.order_by(Reading.created_at.asc())

        with self.session_factory() as session:
            try:
                return list(session.execute(stmt).scalars().all())
            except SQLAlchemyError as exc:
                logger.exception("reading query failed")
                raise _store_error(exc) from exc

    def distinct_device_ids(self) -> List[str]:
        stmt = select(Reading.device_id).distinct().order_by(Reading.device_id)
        with self.session_factory() as session:
            try:
                return list(session.execute(stmt).scalars().all())
            except SQLAlchemyError as exc:
                logger.exception("device listing failed")
                raise _store_error(exc) from exc

