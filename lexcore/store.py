"""In-memory index store shared by all document workers.

The store owns the term → posting-set mapping and the lock that protects
it; nothing outside this module touches the mapping directly.  Writers
call ``record`` (optionally grouped under ``session()``) or ``merge``.
Once the builder has joined every worker it calls ``seal()``, after which
the store is read-only and ``snapshot()`` becomes available.
"""

from __future__ import annotations

import threading
import zlib
from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator

from lexcore.errors import StoreError, StoreSealedError

InvertedIndex = dict[str, list[int]]


class IndexStore:
    """Term → posting set, guarded by one exclusive lock."""

    def __init__(self) -> None:
        self._postings: dict[str, set[int]] = {}
        # Reentrant: record() takes the lock, and may run inside session().
        self._lock = threading.RLock()
        self._sealed = False

    # ── Writes ──────────────────────────────────────────────────────

    def record(self, term: str, doc_id: int) -> None:
        """Add ``doc_id`` to ``term``'s posting set.  Repeats are no-ops."""
        if not term:
            return
        with self._lock:
            self._check_writable()
            postings = self._postings.get(term)
            if postings is None:
                self._postings[term] = {doc_id}
            else:
                postings.add(doc_id)

    @contextmanager
    def session(self) -> Iterator[IndexStore]:
        """Hold the lock so a group of ``record`` calls applies as one."""
        with self._lock:
            self._check_writable()
            yield self

    def merge(self, doc_id: int, terms: Iterable[str]) -> None:
        with self.session():
            for term in terms:
                self.record(term, doc_id)

    # ── Lifecycle ───────────────────────────────────────────────────

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _check_writable(self) -> None:
        if self._sealed:
            raise StoreSealedError("index store is sealed; no further writes")

    # ── Reads ───────────────────────────────────────────────────────

    def snapshot(self) -> InvertedIndex:
        """Term-ascending mapping with ascending posting lists."""
        if not self._sealed:
            raise StoreError("snapshot() requires a sealed store")
        return {term: sorted(self._postings[term]) for term in sorted(self._postings)}

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: object) -> bool:
        return term in self._postings


class ShardedIndexStore:
    """Same interface as ``IndexStore``, split into independently locked shards.

    A term always lands in the same shard (CRC32 of its UTF-8 bytes), so
    two documents with disjoint vocabularies rarely wait on each other.
    """

    def __init__(self, shards: int = 8) -> None:
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._shards = [IndexStore() for _ in range(shards)]

    @property
    def shard_count(self) -> int:
        return len(self._shards)

    def _shard_for(self, term: str) -> IndexStore:
        return self._shards[zlib.crc32(term.encode("utf-8")) % len(self._shards)]

    def record(self, term: str, doc_id: int) -> None:
        if term:
            self._shard_for(term).record(term, doc_id)

    @contextmanager
    def session(self) -> Iterator[ShardedIndexStore]:
        # Fixed acquisition order across all callers, so no lock cycles.
        with ExitStack() as stack:
            for shard in self._shards:
                stack.enter_context(shard.session())
            yield self

    def merge(self, doc_id: int, terms: Iterable[str]) -> None:
        by_shard: dict[int, list[str]] = {}
        for term in terms:
            if term:
                idx = zlib.crc32(term.encode("utf-8")) % len(self._shards)
                by_shard.setdefault(idx, []).append(term)
        for idx in sorted(by_shard):
            self._shards[idx].merge(doc_id, by_shard[idx])

    def seal(self) -> None:
        for shard in self._shards:
            shard.seal()

    @property
    def sealed(self) -> bool:
        return all(shard.sealed for shard in self._shards)

    def snapshot(self) -> InvertedIndex:
        merged: InvertedIndex = {}
        for shard in self._shards:
            merged.update(shard.snapshot())
        return {term: merged[term] for term in sorted(merged)}

    def __len__(self) -> int:
        return sum(len(shard) for shard in self._shards)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and term in self._shard_for(term)


def make_store(shards: int = 1) -> IndexStore | ShardedIndexStore:
    if shards <= 1:
        return IndexStore()
    return ShardedIndexStore(shards)
