"""Credential scrubbing for error text, tool payloads and log events."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any

from src.constants import REDACTED


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of each secret in text."""
    for secret in secrets:
        if secret and secret in text:
            text = text.replace(secret, REDACTED)
    return text


def redact_value(value: Any, secrets: Iterable[str]) -> Any:
    """Recursively redact strings inside dicts, lists and tuples."""
    secrets = tuple(s for s in secrets if s)
    if not secrets:
        return value
    return _walk(value, secrets)


def _walk(value: Any, secrets: tuple[str, ...]) -> Any:
    if isinstance(value, str):
        return redact(value, secrets)
    if isinstance(value, dict):
        return {_walk(k, secrets): _walk(v, secrets) for k, v in value.items()}
    if isinstance(value, list):
        return [_walk(v, secrets) for v in value]
    if isinstance(value, tuple):
        return tuple(_walk(v, secrets) for v in value)
    return value


class SecretRegistry:
    """Process-wide set of credential values that must never be emitted.

    Populated by CredentialStore after each successful token read; consulted
    by the structlog ``redact_secrets`` processor and by the Dispatcher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._secrets: frozenset[str] = frozenset()

    def add(self, secret: str) -> None:
        if not secret:
            return
        with self._lock:
            self._secrets = self._secrets | {secret}

    def snapshot(self) -> frozenset[str]:
        return self._secrets

    def clear(self) -> None:
        with self._lock:
            self._secrets = frozenset()


known_secrets = SecretRegistry()
