import logging

import pytest

from lexcore.errors import DocumentOpenError
from lexcore.policy import FAILURE_KINDS, Action, ErrorPolicy


class TestErrorPolicy:
    def test_default_is_lenient(self):
        policy = ErrorPolicy()
        assert all(policy.action_for(kind) is Action.SKIP for kind in FAILURE_KINDS)

    def test_lenient_logs_and_continues(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lexcore.policy"):
            ErrorPolicy.lenient().handle("document_open", DocumentOpenError("gone", 4))
        assert "document_open" in caplog.text
        assert "gone" in caplog.text

    def test_strict_raises(self):
        error = DocumentOpenError("gone", 4)
        with pytest.raises(DocumentOpenError) as exc_info:
            ErrorPolicy.strict().handle("document_open", error)
        assert exc_info.value is error

    def test_mixed_policy(self):
        policy = ErrorPolicy({"document_line": Action.SKIP, "document_open": Action.ABORT})
        assert policy.action_for("document_line") is Action.SKIP
        assert policy.action_for("document_open") is Action.ABORT
        # kinds left out default to skipping
        assert policy.action_for("manifest_open") is Action.SKIP

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ErrorPolicy().action_for("network")
