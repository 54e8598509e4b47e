"""Document processor: one document's lines → terms → index store.

Two locking granularities:

  document  the store lock is taken once the document is open and held
            for its whole read/record loop.  Documents never interleave.
  batch     the document is read and normalized without the lock, then
            its distinct terms are merged in a single atomic call.

Both produce the same index; ``batch`` lets reading overlap across workers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from lexcore.errors import DocumentLineError, DocumentOpenError, SourceOpenError
from lexcore.policy import ErrorPolicy
from lexcore.sources import LineReadError, LineSource, open_lines
from lexcore.store import IndexStore, ShardedIndexStore
from lexcore.text import terms

logger = logging.getLogger(__name__)

GRANULARITIES = ("document", "batch")


@dataclass
class DocumentResult:
    doc_id: int
    path: str
    indexed: bool = False
    lines_read: int = 0
    lines_skipped: int = 0
    terms_recorded: int = 0


def _document_terms(
    source: LineSource,
    result: DocumentResult,
    policy: ErrorPolicy,
) -> Iterator[str]:
    for line in source:
        if isinstance(line, LineReadError):
            result.lines_skipped += 1
            policy.handle(
                "document_line",
                DocumentLineError(
                    f"{result.path}:{line.lineno}: {line.reason}",
                    result.doc_id,
                    line.lineno,
                ),
            )
            continue
        result.lines_read += 1
        yield from terms(line)


def process_document(
    path: str,
    doc_id: int,
    store: IndexStore | ShardedIndexStore,
    policy: ErrorPolicy | None = None,
    granularity: str = "document",
    encoding: str = "utf-8",
) -> DocumentResult:
    """Index one document under ``doc_id``.

    Returns a ``DocumentResult``; ``indexed`` is False when the document
    could not be opened and the policy chose to skip it.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"granularity must be one of {GRANULARITIES}, got '{granularity}'")
    policy = policy or ErrorPolicy.lenient()
    result = DocumentResult(doc_id=doc_id, path=path)

    try:
        source = open_lines(path, encoding)
    except SourceOpenError as e:
        policy.handle("document_open", DocumentOpenError(str(e), doc_id))
        return result

    with source:
        if granularity == "document":
            with store.session():
                for term in _document_terms(source, result, policy):
                    store.record(term, doc_id)
                    result.terms_recorded += 1
        else:
            distinct: set[str] = set()
            for term in _document_terms(source, result, policy):
                distinct.add(term)
                result.terms_recorded += 1
            store.merge(doc_id, distinct)

    result.indexed = True
    logger.debug(
        "indexed document %d (%s): %d lines, %d terms",
        doc_id, path, result.lines_read, result.terms_recorded,
    )
    return result
