# agrimarket/repository.py

from typing import Callable, Generic, List, Optional, Type, TypeVar
from pydantic import ValidationError as ModelValidationError
from .errors import NotFoundError
from .models import StoredModel
from .storage import EntityStore

ModelT = TypeVar("ModelT", bound=StoredModel)


class Repository(Generic[ModelT]):
    """Id-based access to one collection of the entity store.

    Every call reloads the collection, and every mutation rewrites it whole.
    Mutations work on the stored list itself: records that cannot be read, or
    that share an id with another record, are written back untouched.
    """

    def __init__(self, store: EntityStore, collection: str, model: Type[ModelT]):
        self.store = store
        self.collection = collection
        self.model = model

    def _parse(self, raw: dict) -> Optional[ModelT]:
        try:
            return self.model.model_validate(raw)
        except ModelValidationError as e:
            print(f"---REPOSITORY [{self.collection}]: Skipping unreadable record: {e.error_count()} error(s)---")
            return None

    def _records(self) -> List[ModelT]:
        parsed = (self._parse(raw) for raw in self.store.load(self.collection))
        return [r for r in parsed if r is not None]

    @staticmethod
    def _has_id(raw: dict, record_id: str) -> bool:
        return str(raw.get("id")) == record_id

    def field_names(self, changes: dict) -> dict:
        """Maps stored (camelCase) keys in `changes` to attribute names."""
        by_alias = {f.alias: name for name, f in self.model.model_fields.items() if f.alias}
        return {by_alias.get(k, k): v for k, v in changes.items()}

    def all(self) -> List[ModelT]:
        return self._records()

    def get(self, record_id: str) -> Optional[ModelT]:
        return self.find_first(lambda r: r.id == record_id)

    def require(self, record_id: str) -> ModelT:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.collection, record_id)
        return record

    def find_first(self, predicate: Callable[[ModelT], bool]) -> Optional[ModelT]:
        return next((r for r in self._records() if predicate(r)), None)

    def filter(self, predicate: Callable[[ModelT], bool]) -> List[ModelT]:
        return [r for r in self._records() if predicate(r)]

    def insert(self, record: ModelT) -> ModelT:
        stored = self.store.load(self.collection)
        stored.append(record.to_record())
        self.store.save(self.collection, stored)
        return record

    def update_by_id(self, record_id: str, changes: dict) -> Optional[ModelT]:
        """Merges `changes` into every readable record with this id.

        Returns the first updated record, or None, writing nothing, if no readable record has the id.
        """
        changes = self.field_names(changes)
        stored = self.store.load(self.collection)
        first = None
        for i, raw in enumerate(stored):
            if not self._has_id(raw, record_id):
                continue
            existing = self._parse(raw)
            if existing is None:
                continue
            updated = self.model.model_validate({**existing.model_dump(), **changes, "id": record_id})
            stored[i] = updated.to_record()
            if first is None:
                first = updated
        if first is None:
            return None
        self.store.save(self.collection, stored)
        return first

    def delete_by_id(self, record_id: str) -> bool:
        stored = self.store.load(self.collection)
        kept = [raw for raw in stored if not self._has_id(raw, record_id)]
        if len(kept) == len(stored):
            return False
        self.store.save(self.collection, kept)
        return True
