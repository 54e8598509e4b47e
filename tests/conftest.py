from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def corpus(tmp_path):
    """Write documents + a manifest listing them.

    Usage: ``corpus(["text of doc0", "text of doc1", None])`` where ``None``
    lists a path that does not exist.  ``bytes`` are written verbatim.
    Returns the manifest path as a string.
    """

    def _write(docs, manifest_name: str = "manifest.txt") -> str:
        lines = []
        for i, content in enumerate(docs):
            path = tmp_path / f"doc{i}.txt"
            if isinstance(content, bytes):
                path.write_bytes(content)
            elif content is not None:
                path.write_text(content, encoding="utf-8")
            lines.append(str(path))
        manifest = tmp_path / manifest_name
        manifest.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return str(manifest)

    return _write


def expected_index(docs: list[str | None]) -> dict[str, list[int]]:
    """Single-threaded reference: what the builder must produce."""
    index: dict[str, set[int]] = {}
    for doc_id, content in enumerate(docs):
        if content is None:
            continue
        for token in content.split():
            term = "".join(ch.lower() for ch in token if ch.isalpha())
            if term:
                index.setdefault(term, set()).add(doc_id)
    return {t: sorted(index[t]) for t in sorted(index)}


@pytest.fixture
def reference():
    return expected_index


@pytest.fixture
def missing_path(tmp_path) -> str:
    return str(Path(tmp_path) / "does-not-exist.txt")
