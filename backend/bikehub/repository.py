"""
Bike listing storage.

Two interchangeable backends sit behind ``BikeRepository``:

* ``SQLBikeRepository`` keeps listings in a SQL database through SQLModel and
  survives restarts. Keys are generated hex UUIDs.
* ``InMemoryBikeRepository`` keeps listings in a list owned by the process.
  Keys are integers handed out from a counter and never reused, so deleting
  one listing never changes the key of another.

``build_repository`` picks one from the ``LISTING_STORE`` setting.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, List, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from bikehub.config import Settings
from bikehub.db import build_engine, create_db_and_tables, get_session
from bikehub.errors import NotFoundError, StorageError
from bikehub.models.bike import Bike, validate_bike
from bikehub.models.bike_db import BikeRecord

logger = logging.getLogger(__name__)

NOT_FOUND = "Bike not found"


class BikeRepository(ABC):
    kind = "base"

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> Bike:
        ...

    @abstractmethod
    def list_all(self) -> List[Bike]:
        ...

    @abstractmethod
    def delete_by_key(self, key: str) -> Bike:
        ...

    @abstractmethod
    def delete_by_name(self, name: str) -> Bike:
        ...

    def count(self) -> int:
        return len(self.list_all())


class InMemoryBikeRepository(BikeRepository):
    kind = "memory"

    def __init__(self):
        self._bikes: List[Bike] = []
        self._next_id = 0
        self._lock = threading.Lock()

    def create(self, data):
        bike_in = validate_bike(data)
        with self._lock:
            bike = Bike(id=str(self._next_id), **bike_in.model_dump())
            self._next_id += 1
            self._bikes.append(bike)
        return bike

    def list_all(self):
        with self._lock:
            return list(self._bikes)

    def count(self):
        with self._lock:
            return len(self._bikes)

    def delete_by_key(self, key):
        try:
            index = int(key)
        except (TypeError, ValueError):
            index = key
        with self._lock:
            for i, bike in enumerate(self._bikes):
                if bike.id == str(index):
                    return self._bikes.pop(i)
            raise NotFoundError(NOT_FOUND, index=index, inventoryLength=len(self._bikes))

    def delete_by_name(self, name):
        with self._lock:
            for i, bike in enumerate(self._bikes):
                if bike.name == name:
                    return self._bikes.pop(i)
        raise NotFoundError(NOT_FOUND, name=name)


def _to_bike(record: BikeRecord) -> Bike:
    return Bike(
        id=record.id,
        name=record.name,
        price=record.price,
        desc=record.desc,
        image=record.image,
    )


class SQLBikeRepository(BikeRepository):
    kind = "sql"

    def __init__(self, engine):
        self.engine = engine

    def create(self, data):
        bike_in = validate_bike(data)
        try:
            with get_session(self.engine) as session:
                record = BikeRecord(**bike_in.model_dump())
                session.add(record)
                session.commit()
                session.refresh(record)
                return _to_bike(record)
        except SQLAlchemyError:
            logger.exception("Failed to save bike %r", bike_in.name)
            raise StorageError("Server error while adding bike")

    def list_all(self):
        try:
            with get_session(self.engine) as session:
                records = session.exec(select(BikeRecord).order_by(BikeRecord.seq)).all()
                return [_to_bike(r) for r in records]
        except SQLAlchemyError:
            logger.exception("Failed to fetch bikes")
            raise StorageError("Server error while fetching bikes")

    def _delete_first(self, statement, **context) -> Bike:
        try:
            with get_session(self.engine) as session:
                record = session.exec(statement).first()
                if not record:
                    raise NotFoundError(NOT_FOUND, **context)
                bike = _to_bike(record)
                session.delete(record)
                session.commit()
                return bike
        except SQLAlchemyError:
            logger.exception("Failed to delete bike %r", context)
            raise StorageError("Server error while deleting bike")

    def delete_by_key(self, key):
        return self._delete_first(select(BikeRecord).where(BikeRecord.id == key), id=key)

    def delete_by_name(self, name):
        statement = select(BikeRecord).where(BikeRecord.name == name).order_by(BikeRecord.seq)
        return self._delete_first(statement, name=name)


def build_repository(settings: Settings) -> BikeRepository:
    if settings.listing_store == "memory":
        logger.info("Using in-memory bike inventory")
        return InMemoryBikeRepository()
    engine = build_engine(settings.database_url)
    create_db_and_tables(engine)
    logger.info("Using SQL bike inventory at %s", engine.url.render_as_string(hide_password=True))
    return SQLBikeRepository(engine)
