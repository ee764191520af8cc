"""Persistence-facing interface shared by every record type.

``Store`` is what the managers and the auth workflow depend on.
``SQLModelStore`` backs it with a database session; ``InMemoryStore``
(``booking_api.repositories.memory``) backs it with a dict.

``update`` and ``delete`` look the record up before touching it, so a
missing or tombstoned id raises ``NotFoundError`` with nothing written.
The lookup and the write are separate statements; isolation between them
is whatever the database provides.
"""

import logging
from typing import Any, Callable, Generic, Iterable, Optional, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from booking_api.core.errors import NotFoundError, StorageError, ValidationError
from booking_api.models.base import utc_now


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)
T = TypeVar("T")


class Store(Protocol[ModelT]):
    model: type[ModelT]

    def get(self, record_id: int, include_deleted: bool = True) -> ModelT:
        ...

    def get_many(self, ids: Iterable[int], include_deleted: bool = False) -> list[ModelT]:
        ...

    def find_one(self, **criteria: Any) -> Optional[ModelT]:
        ...

    def find_all(self, include_deleted: bool = False, **criteria: Any) -> list[ModelT]:
        ...

    def create(self, record: ModelT) -> ModelT:
        ...

    def update(self, record_id: int, changes: dict[str, Any]) -> ModelT:
        ...

    def delete(self, record_id: int) -> ModelT:
        ...


def not_found(model: type[SQLModel], record_id: int) -> NotFoundError:
    return NotFoundError(f"{model.__name__} ID ({record_id}) does not exist in the database.")


def check_fields(model: type[SQLModel], changes: dict[str, Any]) -> None:
    unknown = sorted(name for name in changes if name == "id" or name not in model.model_fields)
    if unknown:
        raise ValidationError(f"Unknown or read-only {model.__name__} field(s): {', '.join(unknown)}")


class SQLModelStore(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT]):
        self.session = session
        self.model = model

    def _run(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("%s store operation failed: %s", self.model.__name__, exc)
            raise StorageError(f"Database operation on {self.model.__name__} failed. [{exc}]") from exc

    def _save(self, record: ModelT) -> ModelT:
        def save() -> ModelT:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
            return record

        return self._run(save)

    def get(self, record_id: int, include_deleted: bool = True) -> ModelT:
        record = self._run(lambda: self.session.get(self.model, record_id))

        if record is None or (not include_deleted and record.deleted_at is not None):
            raise not_found(self.model, record_id)

        return record

    def get_many(self, ids: Iterable[int], include_deleted: bool = False) -> list[ModelT]:
        ids = list(ids)
        if not ids:
            return []

        statement = select(self.model).where(self.model.id.in_(ids))
        if not include_deleted:
            statement = statement.where(self.model.deleted_at == None)  # noqa: E711

        statement = statement.order_by(self.model.id)
        return list(self._run(lambda: self.session.exec(statement).all()))

    def find_all(self, include_deleted: bool = False, **criteria: Any) -> list[ModelT]:
        statement = select(self.model)

        for name, value in criteria.items():
            statement = statement.where(getattr(self.model, name) == value)

        if not include_deleted:
            statement = statement.where(self.model.deleted_at == None)  # noqa: E711

        statement = statement.order_by(self.model.id)
        return list(self._run(lambda: self.session.exec(statement).all()))

    def find_one(self, **criteria: Any) -> Optional[ModelT]:
        records = self.find_all(**criteria)
        return records[0] if records else None

    def create(self, record: ModelT) -> ModelT:
        return self._save(record)

    def update(self, record_id: int, changes: dict[str, Any]) -> ModelT:
        check_fields(self.model, changes)
        record = self.get(record_id, include_deleted=False)

        for name, value in changes.items():
            setattr(record, name, value)
        record.updated_at = utc_now()

        return self._save(record)

    def delete(self, record_id: int) -> ModelT:
        record = self.get(record_id, include_deleted=False)
        record.deleted_at = utc_now()
        return self._save(record)
