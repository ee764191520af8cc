from typing import Any, Generic, Iterable, Optional

from booking_api.models.base import utc_now
from booking_api.repositories.store import ModelT, check_fields, not_found


class InMemoryStore(Generic[ModelT]):
    """``Store`` over a plain dict keyed by id.

    Records are copied on the way in and out so callers never hold the
    stored instance.
    """

    def __init__(self, model: type[ModelT]):
        self.model = model
        self.records: dict[int, ModelT] = {}
        self._next_id = 1

    def _copy(self, record: ModelT) -> ModelT:
        return self.model(**record.model_dump())

    def _matches(self, record: ModelT, criteria: dict[str, Any]) -> bool:
        return all(getattr(record, name) == value for name, value in criteria.items())

    def get(self, record_id: int, include_deleted: bool = True) -> ModelT:
        record = self.records.get(record_id)

        if record is None or (not include_deleted and record.deleted_at is not None):
            raise not_found(self.model, record_id)

        return self._copy(record)

    def get_many(self, ids: Iterable[int], include_deleted: bool = False) -> list[ModelT]:
        wanted = set(ids)
        return [
            self._copy(record)
            for record_id, record in sorted(self.records.items())
            if record_id in wanted and (include_deleted or record.deleted_at is None)
        ]

    def find_all(self, include_deleted: bool = False, **criteria: Any) -> list[ModelT]:
        return [
            self._copy(record)
            for _, record in sorted(self.records.items())
            if (include_deleted or record.deleted_at is None) and self._matches(record, criteria)
        ]

    def find_one(self, **criteria: Any) -> Optional[ModelT]:
        records = self.find_all(**criteria)
        return records[0] if records else None

    def create(self, record: ModelT) -> ModelT:
        stored = self._copy(record)
        stored.id = self._next_id
        self._next_id += 1

        self.records[stored.id] = stored
        return self._copy(stored)

    def update(self, record_id: int, changes: dict[str, Any]) -> ModelT:
        check_fields(self.model, changes)
        record = self.get(record_id, include_deleted=False)

        for name, value in changes.items():
            setattr(record, name, value)
        record.updated_at = utc_now()

        self.records[record_id] = record
        return self._copy(record)

    def delete(self, record_id: int) -> ModelT:
        record = self.get(record_id, include_deleted=False)
        record.deleted_at = utc_now()

        self.records[record_id] = record
        return self._copy(record)
