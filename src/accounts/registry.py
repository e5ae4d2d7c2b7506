"""AccountRegistry: alias → Account resolution.

Built once at startup from a validated AccountsConfig.
Thread-safe for read (no mutation after init).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.accounts.config import AccountsConfig
from src.infra.errors import UnknownAccountError


@dataclass(frozen=True)
class Account:
    """A configured GitHub identity."""

    alias: str
    token_path: str  # as written in config; may start with "~"

    @property
    def expanded_token_path(self) -> Path:
        return Path(self.token_path).expanduser()


class AccountRegistry:
    def __init__(self, config: AccountsConfig) -> None:
        self._accounts: dict[str, Account] = {
            alias: Account(alias=alias, token_path=cfg.token_path)
            for alias, cfg in config.accounts.items()
        }
        self._default = config.default_account

    def resolve(self, alias: str | None = None) -> Account:
        """Get account by alias, or the default if None.

        Raises UnknownAccountError if the alias is not configured.
        """
        key = alias or self._default
        account = self._accounts.get(key)
        if account is None:
            raise UnknownAccountError(key, list(self._accounts))
        return account

    @property
    def default_alias(self) -> str:
        return self._default

    def aliases(self) -> list[str]:
        return sorted(self._accounts)

    def accounts(self) -> list[Account]:
        return [self._accounts[alias] for alias in self.aliases()]
