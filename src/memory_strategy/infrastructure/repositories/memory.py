"""Lock-striped in-memory repository for memory records."""

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass

from memory_strategy.domain.models.memory import MemoryRecord


@dataclass(slots=True)
class _Entry:
    sequence: int
    record: MemoryRecord


class _Shard:
    __slots__ = ("entries", "lock")

    def __init__(self) -> None:
        self.entries: dict[str, _Entry] = {}
        self.lock = threading.Lock()


class InMemoryRecordRepository:
    """Concurrent map of record id to ``MemoryRecord``.

    Records are spread over ``stripes`` shards, each guarded by its own lock,
    so writers to different records rarely contend and readers never take a
    store-wide lock. Every record keeps the sequence number of its insertion,
    which fixes candidate order for stable ranking.

    Records returned by ``get``, ``replace`` and ``mutate`` are deep copies.
    ``snapshot`` returns the live objects for read-only scoring unless asked
    to copy.
    """

    def __init__(self, stripes: int = 16):
        if stripes < 1:
            raise ValueError("stripes must be >= 1")
        self._shards = [_Shard() for _ in range(stripes)]
        self._sequence = itertools.count()

    def _shard(self, record_id: str) -> _Shard:
        return self._shards[hash(record_id) % len(self._shards)]

    def insert(self, record: MemoryRecord) -> bool:
        """Add ``record`` unless its id is taken. Returns False on collision."""
        shard = self._shard(record.record_id)
        with shard.lock:
            if record.record_id in shard.entries:
                return False
            shard.entries[record.record_id] = _Entry(next(self._sequence), record.model_copy(deep=True))
        return True

    def get(self, record_id: str) -> MemoryRecord | None:
        shard = self._shard(record_id)
        with shard.lock:
            entry = shard.entries.get(record_id)
            return entry.record.model_copy(deep=True) if entry else None

    def replace(
        self,
        record_id: str,
        build: Callable[[MemoryRecord], MemoryRecord],
    ) -> MemoryRecord | None:
        """Swap the stored record for ``build(current)``, keeping its insertion slot.

        Returns a copy of the new record, or None if ``record_id`` is absent.
        """
        shard = self._shard(record_id)
        with shard.lock:
            entry = shard.entries.get(record_id)
            if entry is None:
                return None
            entry.record = build(entry.record)
            return entry.record.model_copy(deep=True)

    def mutate(
        self,
        record_id: str,
        apply: Callable[[MemoryRecord], bool],
    ) -> tuple[MemoryRecord, bool] | None:
        """Run ``apply`` on the stored record under its shard lock.

        ``apply`` mutates in place and reports whether it changed anything.
        Returns ``(copy, changed)``, or None if ``record_id`` is absent.
        """
        shard = self._shard(record_id)
        with shard.lock:
            entry = shard.entries.get(record_id)
            if entry is None:
                return None
            changed = apply(entry.record)
            return entry.record.model_copy(deep=True), changed

    def remove(self, record_id: str) -> bool:
        shard = self._shard(record_id)
        with shard.lock:
            return shard.entries.pop(record_id, None) is not None

    def remove_if(self, record_id: str, predicate: Callable[[MemoryRecord], bool]) -> bool:
        """Remove ``record_id`` only if ``predicate`` still holds under the lock."""
        shard = self._shard(record_id)
        with shard.lock:
            entry = shard.entries.get(record_id)
            if entry is None or not predicate(entry.record):
                return False
            del shard.entries[record_id]
            return True

    def snapshot(self, copy: bool = False) -> list[MemoryRecord]:
        """Point-in-time view of all records in insertion order.

        Each shard is read under its own lock; the result may interleave
        with concurrent writes to other shards. By default the live stored
        objects are returned, and fields that writers update in place
        (``last_accessed_at``, ``access_count``, ``consolidated``) can change
        while the caller reads them. With ``copy=True`` every record is deep
        copied under its shard lock, so each one is internally consistent.
        """
        entries: list[_Entry] = []
        for shard in self._shards:
            with shard.lock:
                for entry in shard.entries.values():
                    record = entry.record.model_copy(deep=True) if copy else entry.record
                    entries.append(_Entry(entry.sequence, record))
        entries.sort(key=lambda entry: entry.sequence)
        return [entry.record for entry in entries]

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total

    def __contains__(self, record_id: object) -> bool:
        if not isinstance(record_id, str):
            return False
        shard = self._shard(record_id)
        with shard.lock:
            return record_id in shard.entries
