"""CredentialStore: lazy, memoized token reads per account.

The first credential_for() call per account reads the token file in a worker
thread; every later call returns the cached value without I/O. Concurrent first
calls for the same account share one read via a per-alias asyncio.Lock.
Entries are never evicted or mutated.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import structlog

from src.accounts.registry import Account
from src.infra.errors import CredentialError
from src.infra.redaction import SecretRegistry, known_secrets

logger = structlog.get_logger()


def read_token_file(path: Path) -> str:
    """Blocking read of a token file. Raises CredentialError, never leaks content."""
    if not path.exists():
        raise CredentialError(f"Token file not found: {path}")
    try:
        token = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Only the error class: some decode errors quote the offending bytes.
        raise CredentialError(
            f"Token file read error: {path}: {type(e).__name__}"
        ) from None
    if not token:
        raise CredentialError(f"Token file is empty: {path}")
    return token


class CredentialStore:
    def __init__(
        self,
        *,
        reader: Callable[[Path], str] = read_token_file,
        secrets: SecretRegistry = known_secrets,
    ) -> None:
        self._reader = reader
        self._secrets = secrets
        self._cache: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def credential_for(self, account: Account) -> str:
        cached = self._cache.get(account.alias)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(account.alias, asyncio.Lock())
        async with lock:
            cached = self._cache.get(account.alias)
            if cached is not None:
                return cached

            path = account.expanded_token_path
            token = await asyncio.to_thread(self._reader, path)
            self._secrets.add(token)
            self._cache[account.alias] = token
            logger.info("credential_loaded", account=account.alias, token_path=str(path))
            return token

    def is_cached(self, account: Account) -> bool:
        return account.alias in self._cache
