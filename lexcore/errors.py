"""Exception hierarchy for Lexicon.

Data errors (unreadable manifest, missing documents, bad lines) are handed
to an ``ErrorPolicy`` that decides whether they are skipped or raised.
Structural errors (sealed store, worker failures, bad config) always raise.
"""

from __future__ import annotations


class LexiconError(Exception):
    """Base class for every error raised by Lexicon."""


class SourceOpenError(LexiconError):
    """A line source could not be opened."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot open {path}: {reason}")
        self.path = path
        self.reason = reason


# ── Data errors ─────────────────────────────────────────────────────


class DataError(LexiconError):
    """A missing or unreadable input.  Subject to the error policy."""


class ManifestOpenError(DataError):
    pass


class ManifestLineError(DataError):
    def __init__(self, message: str, doc_id: int):
        super().__init__(message)
        self.doc_id = doc_id


class DocumentOpenError(DataError):
    def __init__(self, message: str, doc_id: int):
        super().__init__(message)
        self.doc_id = doc_id


class DocumentLineError(DataError):
    def __init__(self, message: str, doc_id: int, lineno: int):
        super().__init__(message)
        self.doc_id = doc_id
        self.lineno = lineno


# ── Structural errors ───────────────────────────────────────────────


class StoreError(LexiconError):
    pass


class StoreSealedError(StoreError):
    """A write was attempted after the build finished."""


class WorkerJoinError(LexiconError):
    """A document worker failed in a way no error policy covers."""

    def __init__(self, doc_id: int, path: str, cause: BaseException):
        super().__init__(
            f"worker for document {doc_id} ({path}) failed: "
            f"{type(cause).__name__}: {cause}"
        )
        self.doc_id = doc_id
        self.path = path


class ConfigError(LexiconError):
    def __init__(self, errors: list[str]):
        super().__init__("invalid configuration: " + "; ".join(errors))
        self.errors = errors
