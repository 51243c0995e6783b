"""JSON-backed record collections.

Each collection (``products``, ``carts``, ...) lives in a single
``<root>/<name>.json`` file holding a JSON array of records. Every mutating
operation rewrites the whole file: the new payload is written to a temporary
file, fsynced and moved into place, after the previous version has been
rotated into a configurable number of ``.bakN`` backups. Loading falls back to
the newest readable backup when the primary file is corrupt.

Writers are serialised per collection through :meth:`CollectionStore.mutate`
so two concurrent load/mutate/write cycles cannot overwrite each other.
"""
from __future__ import annotations

import json
import os
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Sequence

from .errors import StorageError
from .logger import get_logger

_logger = get_logger(__name__)

Record = Dict[str, Any]
Mutator = Callable[[List[Record]], Iterable[Record] | None]

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class CollectionStore:
    """Load and replace named collections of records under ``root``."""

    def __init__(self, root: Path | str, backups: int = 2):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.backups = max(0, backups)
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def path_for(self, name: str) -> Path:
        if not _NAME_PATTERN.match(name or ""):
            raise StorageError(f"invalid collection name: {name!r}")
        return self.root / f"{name}.json"

    def _candidate_paths(self, path: Path) -> list[Path]:
        paths = [path]
        for idx in range(1, self.backups + 1):
            paths.append(path.with_suffix(path.suffix + f".bak{idx}"))
        return paths

    def _read_json(self, path: Path) -> List[Record] | None:
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"cannot read {path.name}: {exc}") from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return None
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            return None
        return data

    def _write_json(self, path: Path, data: Sequence[Record]) -> None:
        payload = json.dumps(list(data), indent=2)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"cannot write {path.name}: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    def _rotate_backups(self, path: Path) -> None:
        if self.backups <= 0:
            return
        for idx in range(self.backups, 0, -1):
            if idx == 1:
                src = path
            else:
                src = path.with_suffix(path.suffix + f".bak{idx - 1}")
            dest = path.with_suffix(path.suffix + f".bak{idx}")
            if src.exists():
                try:
                    os.replace(src, dest)
                except OSError:
                    # Rotation is best effort; the new write still goes ahead.
                    _logger.warning(f"Could not rotate backup {src.name}")
                    continue

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------
    def lock(self, name: str) -> threading.RLock:
        """Return the re-entrant lock guarding writes to ``name``."""

        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.RLock()
            return lock

    @contextmanager
    def locked(self, name: str) -> Iterator[None]:
        with self.lock(name):
            yield

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def exists(self, name: str) -> bool:
        return any(p.exists() for p in self._candidate_paths(self.path_for(name)))

    def ensure(self, name: str) -> None:
        """Create an empty collection if neither it nor a backup exists."""

        with self.locked(name):
            if not self.exists(name):
                self._write_json(self.path_for(name), [])
                _logger.info(f"Created empty collection '{name}'")

    def load_all(self, name: str) -> List[Record]:
        path = self.path_for(name)
        found_any = False
        for candidate in self._candidate_paths(path):
            if candidate.exists():
                found_any = True
            data = self._read_json(candidate)
            if data is not None:
                if candidate != path:
                    _logger.warning(f"Recovered collection '{name}' from backup {candidate.name}")
                return [dict(item) for item in data]
        if not found_any:
            raise StorageError(f"collection '{name}' does not exist")
        raise StorageError(f"collection '{name}' is corrupt and no readable backup remains")

    def replace_all(self, name: str, records: Iterable[Record]) -> List[Record]:
        snapshot: List[Record] = []
        for item in records:
            snapshot.append(dict(item))
        path = self.path_for(name)
        with self.locked(name):
            self._rotate_backups(path)
            self._write_json(path, snapshot)
        return snapshot

    def mutate(self, name: str, mutator: Mutator) -> List[Record]:
        """Load ``name``, apply ``mutator`` and write the result back.

        The mutator may edit the list in place (returning ``None``) or return a
        replacement iterable. If it raises, nothing is written. The whole
        sequence runs under the collection lock.
        """

        with self.locked(name):
            snapshot = self.load_all(name)
            outcome = mutator(snapshot)
            if outcome is None:
                updated = snapshot
            else:
                updated = [dict(item) for item in outcome]
            return self.replace_all(name, updated)
