"""Tests for credential redaction helpers and the structlog redaction processor."""

from __future__ import annotations

import json

import pytest
import structlog

from src.infra.logging import redact_secrets, setup_logging
from src.infra.redaction import SecretRegistry, known_secrets, redact, redact_value
from tests.helpers import HOME_TOKEN, WORK_TOKEN


class TestRedact:
    def test_replaces_every_occurrence(self) -> None:
        text = f"{HOME_TOKEN} and again {HOME_TOKEN}"
        assert redact(text, [HOME_TOKEN]) == "*** and again ***"

    def test_empty_secret_ignored(self) -> None:
        assert redact("unchanged", ["", HOME_TOKEN]) == "unchanged"

    def test_nested_values(self) -> None:
        value = {"a": [HOME_TOKEN, ("x", WORK_TOKEN)], HOME_TOKEN: 1, "n": 5}
        assert redact_value(value, [HOME_TOKEN, WORK_TOKEN]) == {
            "a": ["***", ("x", "***")],
            "***": 1,
            "n": 5,
        }


class TestSecretRegistry:
    def test_add_snapshot_clear(self) -> None:
        registry = SecretRegistry()
        registry.add(HOME_TOKEN)
        registry.add("")
        assert registry.snapshot() == frozenset({HOME_TOKEN})
        registry.clear()
        assert registry.snapshot() == frozenset()


class TestRedactSecretsProcessor:
    def test_no_known_secrets_passthrough(self) -> None:
        event = {"event": "x", "detail": HOME_TOKEN}
        assert redact_secrets(None, "info", event) is event

    def test_scrubs_known_secrets(self) -> None:
        known_secrets.add(HOME_TOKEN)
        event = {"event": "command_failed", "stderr": f"bad {HOME_TOKEN}"}
        assert redact_secrets(None, "info", event) == {
            "event": "command_failed",
            "stderr": "bad ***",
        }


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        structlog.reset_defaults()

    def test_json_lines_on_stderr_redacted(self, capsys) -> None:
        setup_logging(json_output=True, log_level="INFO")
        known_secrets.add(WORK_TOKEN)
        log = structlog.get_logger()

        log.info("tool_failed", message=f"echo {WORK_TOKEN}")
        log.debug("filtered_out")

        captured = capsys.readouterr()
        assert captured.out == ""
        [line] = captured.err.strip().splitlines()
        record = json.loads(line)
        assert record["event"] == "tool_failed"
        assert record["message"] == "echo ***"
        assert record["level"] == "info"
