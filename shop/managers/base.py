"""Generic entity manager built on a shared :class:`CollectionStore`.

Subclasses describe one entity (collection name, required fields, payload
models) and expose the public operations that entity supports. The managers
hold no collection snapshot between calls: every operation loads fresh and
writes back through :meth:`CollectionStore.mutate`, which serialises writers
per collection.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Mapping, Sequence, Type

from pydantic import ValidationError as PydanticValidationError

from storekit.coerce import to_int
from storekit.errors import NotFoundError, ValidationError
from storekit.ids import next_id
from storekit.logger import get_logger
from storekit.storage import CollectionStore

from ..models import QuantityModel, RecordModel

_logger = get_logger(__name__)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def describe_errors(err: PydanticValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(piece) for piece in item.get("loc", ())) or "payload"
        parts.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return "invalid fields: " + "; ".join(parts)


class EntityManager:
    """Shared load/scan/mutate logic for one record collection."""

    collection: ClassVar[str] = ""
    label: ClassVar[str] = "record"
    required_fields: ClassVar[Sequence[str]] = ()
    create_model: ClassVar[Type[RecordModel]] = RecordModel
    update_model: ClassVar[Type[RecordModel]] = RecordModel
    supports_limit: ClassVar[bool] = False

    def __init__(self, store: CollectionStore):
        self._store = store

    @property
    def store(self) -> CollectionStore:
        return self._store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_all(self, limit: Any = None) -> list[dict]:
        records = self._store.load_all(self.collection)
        if _is_missing(limit) or not self.supports_limit:
            return records
        cap = to_int(limit)
        if cap is None or cap < 0:
            raise ValidationError(f"limit must be a non-negative integer, got {limit!r}")
        # 0 means no cap.
        return records[:cap] if cap else records

    def get_by_id(self, record_id: Any) -> dict:
        _, record = self._find(self._store.load_all(self.collection), record_id)
        return record

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------
    def _not_found(self, record_id: Any) -> NotFoundError:
        return NotFoundError(f"{self.label} not found: {record_id}")

    def _find(self, records: Sequence[dict], record_id: Any) -> tuple[int, dict]:
        target = to_int(record_id)
        if target is not None:
            for index, item in enumerate(records):
                if item.get("id") == target:
                    return index, item
        raise self._not_found(record_id)

    def _check_required(self, data: Mapping[str, Any]) -> None:
        missing = [name for name in self.required_fields if _is_missing(data.get(name))]
        if missing:
            raise ValidationError("missing required fields: " + ", ".join(missing))

    def _coerce(self, model: Type[RecordModel], data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
        try:
            parsed = model.model_validate(dict(data))
        except PydanticValidationError as err:
            raise ValidationError(describe_errors(err)) from err
        return parsed.to_record(exclude_none=partial)

    def _append(self, fields: Mapping[str, Any]) -> dict:
        created: Dict[str, Any] = {}

        def mutator(items: list[dict]) -> None:
            created.update({"id": next_id(items), **fields})
            items.append(dict(created))

        self._store.mutate(self.collection, mutator)
        _logger.info(f"Created {self.label} {created['id']}")
        return created

    def _mutate_one(self, record_id: Any, change: Callable[[dict], dict]) -> dict:
        """Replace one record with ``change(record)`` and persist."""

        updated: Dict[str, Any] = {}

        def mutator(items: list[dict]) -> None:
            index, current = self._find(items, record_id)
            result = change(dict(current))
            result["id"] = current["id"]
            items[index] = result
            updated.update(result)

        self._store.mutate(self.collection, mutator)
        return updated

    def _remove(self, record_id: Any) -> dict:
        removed: Dict[str, Any] = {}

        def mutator(items: list[dict]) -> list[dict]:
            index, current = self._find(items, record_id)
            removed.update(current)
            return items[:index] + items[index + 1:]

        self._store.mutate(self.collection, mutator)
        _logger.info(f"Deleted {self.label} {removed['id']}")
        return removed

    # ------------------------------------------------------------------
    # Generic create/update used by the field-based entities
    # ------------------------------------------------------------------
    def _insert(self, data: Mapping[str, Any] | None, **extra: Any) -> dict:
        payload = dict(data or {})
        self._check_required(payload)
        fields = self._coerce(self.create_model, {**payload, **extra})
        return self._append(fields)

    def _update(
        self,
        record_id: Any,
        data: Mapping[str, Any] | None,
        *,
        before: Callable[[dict], None] | None = None,
        **extra: Any,
    ) -> dict:
        payload = {k: v for k, v in dict(data or {}).items() if not _is_missing(v)}
        payload.pop("id", None)
        fields = self._coerce(self.update_model, payload, partial=True)
        fields.update(extra)

        def change(current: dict) -> dict:
            if before is not None:
                before(dict(current))
            return {**current, **fields}

        record = self._mutate_one(record_id, change)
        _logger.info(f"Updated {self.label} {record['id']}")
        return record

    # ------------------------------------------------------------------
    # Line items (cart products, order skus)
    # ------------------------------------------------------------------
    def _add_line(
        self,
        container_id: Any,
        lines_key: str,
        ref_key: str,
        ref_id: Any,
        quantity: Any = 1,
        check: Callable[[Any], None] | None = None,
    ) -> dict:
        """Increment the line for ``ref_id`` or append a new one.

        ``check`` runs after the container is found and before anything is
        changed; it raises to reject the referenced id.
        """

        amount = self._coerce_quantity(quantity)
        target = to_int(ref_id)

        def change(container: dict) -> dict:
            if check is not None:
                check(ref_id)
            if target is None or target < 1:
                raise ValidationError(f"{ref_key} must be a positive integer, got {ref_id!r}")
            lines = [dict(line) for line in container.get(lines_key) or []]
            for line in lines:
                if line.get(ref_key) == target:
                    line["quantity"] = int(line.get("quantity") or 0) + amount
                    break
            else:
                lines.append({ref_key: target, "quantity": amount})
            container[lines_key] = lines
            return container

        record = self._mutate_one(container_id, change)
        _logger.info(f"Added {amount} x {ref_key}={target} to {self.label} {record['id']}")
        return record

    @staticmethod
    def _coerce_quantity(quantity: Any) -> int:
        if quantity is None:
            return 1
        try:
            return QuantityModel(quantity=quantity).quantity
        except PydanticValidationError as err:
            raise ValidationError(describe_errors(err)) from err
