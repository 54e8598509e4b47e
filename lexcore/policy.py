"""Error policy: per failure kind, skip and continue or abort the build."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from lexcore.errors import DataError

logger = logging.getLogger(__name__)


class Action(str, Enum):
    SKIP = "skip"
    ABORT = "abort"


FAILURE_KINDS = ("manifest_open", "manifest_line", "document_open", "document_line")


@dataclass(frozen=True)
class ErrorPolicy:
    actions: dict[str, Action] = field(
        default_factory=lambda: {kind: Action.SKIP for kind in FAILURE_KINDS}
    )

    @classmethod
    def lenient(cls) -> ErrorPolicy:
        return cls({kind: Action.SKIP for kind in FAILURE_KINDS})

    @classmethod
    def strict(cls) -> ErrorPolicy:
        return cls({kind: Action.ABORT for kind in FAILURE_KINDS})

    def action_for(self, kind: str) -> Action:
        if kind not in FAILURE_KINDS:
            raise ValueError(f"unknown failure kind '{kind}'")
        return self.actions.get(kind, Action.SKIP)

    def handle(self, kind: str, error: DataError) -> None:
        """Raise ``error`` if ``kind`` aborts, otherwise log and return."""
        if self.action_for(kind) is Action.ABORT:
            raise error
        logger.warning("skipping (%s): %s", kind, error)
