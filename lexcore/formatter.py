"""Plain-text rendering of a finished inverted index.

One line per term, terms ascending: ``term: 0 3 7 \\n``.  Every
identifier is followed by a single space, including the last.
"""

from __future__ import annotations

from typing import Iterable, TextIO

from lexcore.store import InvertedIndex


def format_line(term: str, postings: Iterable[int]) -> str:
    return f"{term}: " + "".join(f"{doc_id} " for doc_id in sorted(postings)) + "\n"


def format_index(index: InvertedIndex) -> str:
    return "".join(format_line(term, index[term]) for term in sorted(index))


def write_index(index: InvertedIndex, stream: TextIO) -> None:
    for term in sorted(index):
        stream.write(format_line(term, index[term]))
