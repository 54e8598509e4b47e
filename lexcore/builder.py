"""Index builder: reads the manifest, fans documents out to worker threads,
joins them, and returns the finished inverted index.

Document identifiers are manifest line positions.  A line that cannot be
read, or a path that cannot be opened, still consumes its identifier, so
the id of every later document is unchanged.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from lexcore.config import BuildConfig
from lexcore.errors import (
    DataError,
    ManifestLineError,
    ManifestOpenError,
    SourceOpenError,
    WorkerJoinError,
)
from lexcore.policy import ErrorPolicy
from lexcore.processor import DocumentResult, process_document
from lexcore.sources import LineReadError, open_lines
from lexcore.store import IndexStore, InvertedIndex, ShardedIndexStore, make_store

logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    manifest_lines: int = 0
    documents_launched: int = 0
    documents_indexed: int = 0
    documents_skipped: int = 0
    lines_skipped: int = 0
    terms_recorded: int = 0
    unique_terms: int = 0
    workers: int = 0
    elapsed: float = 0.0


# ── Manifest ────────────────────────────────────────────────────────

def read_manifest(
    manifest_path: str,
    policy: ErrorPolicy,
    encoding: str = "utf-8",
) -> tuple[list[tuple[int, str]], int]:
    """Return ([(doc_id, path), ...], manifest line count).

    Unreadable lines are left out of the entry list but still counted.
    """
    try:
        source = open_lines(manifest_path, encoding)
    except SourceOpenError as e:
        policy.handle("manifest_open", ManifestOpenError(str(e)))
        return [], 0

    entries: list[tuple[int, str]] = []
    doc_id = 0
    with source:
        for line in source:
            if isinstance(line, LineReadError):
                policy.handle(
                    "manifest_line",
                    ManifestLineError(
                        f"{manifest_path}:{line.lineno}: {line.reason}", doc_id
                    ),
                )
            else:
                entries.append((doc_id, line))
            doc_id += 1
    return entries, doc_id


# ── Builder ─────────────────────────────────────────────────────────

class IndexBuilder:
    def __init__(self, config: BuildConfig | None = None, policy: ErrorPolicy | None = None):
        self.config = config or BuildConfig()
        self.policy = policy or self.config.policy

    def _new_store(self) -> IndexStore | ShardedIndexStore:
        return make_store(self.config.shards)

    def _pool_size(self, documents: int) -> int:
        if self.config.workers == 0:
            return max(documents, 1)
        return self.config.workers

    def build(self, manifest_path: str) -> InvertedIndex:
        index, _ = self.build_with_summary(manifest_path)
        return index

    def build_with_summary(self, manifest_path: str) -> tuple[InvertedIndex, BuildSummary]:
        started = time.perf_counter()
        summary = BuildSummary()
        store = self._new_store()

        entries, summary.manifest_lines = read_manifest(
            manifest_path, self.policy, self.config.encoding
        )
        summary.workers = self._pool_size(len(entries))
        logger.debug(
            "manifest %s: %d lines, %d documents, %d workers",
            manifest_path, summary.manifest_lines, len(entries), summary.workers,
        )

        futures: list[tuple[int, str, Future[DocumentResult]]] = []
        with ThreadPoolExecutor(
            max_workers=summary.workers, thread_name_prefix="lexicon-doc"
        ) as pool:
            for doc_id, path in entries:
                fut = pool.submit(
                    process_document,
                    path,
                    doc_id,
                    store,
                    self.policy,
                    self.config.granularity,
                    self.config.encoding,
                )
                futures.append((doc_id, path, fut))
            summary.documents_launched = len(futures)
            # Leaving the block joins every worker before results are read.

        for doc_id, path, fut in futures:
            exc = fut.exception()
            if exc is None:
                result = fut.result()
                if result.indexed:
                    summary.documents_indexed += 1
                else:
                    summary.documents_skipped += 1
                summary.lines_skipped += result.lines_skipped
                summary.terms_recorded += result.terms_recorded
            elif isinstance(exc, DataError):
                raise exc
            else:
                raise WorkerJoinError(doc_id, path, exc) from exc

        store.seal()
        index = store.snapshot()
        summary.unique_terms = len(index)
        summary.elapsed = time.perf_counter() - started
        logger.info(
            "built index: %d/%d documents, %d unique terms in %.3fs",
            summary.documents_indexed, summary.documents_launched,
            summary.unique_terms, summary.elapsed,
        )
        return index, summary


def build_index(manifest_path: str, config: BuildConfig | None = None) -> InvertedIndex:
    return IndexBuilder(config).build(manifest_path)
