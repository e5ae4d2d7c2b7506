"""Tests for AccountRegistry alias resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.accounts.config import AccountConfig, AccountsConfig
from src.accounts.registry import Account, AccountRegistry
from src.infra.errors import UnknownAccountError


def _registry() -> AccountRegistry:
    return AccountRegistry(
        AccountsConfig(
            default_account="home",
            accounts={
                "home": AccountConfig(token_path="~/tokens/home"),
                "work": AccountConfig(token_path="/etc/tokens/work"),
            },
        )
    )


class TestResolve:
    def test_none_resolves_to_default(self) -> None:
        assert _registry().resolve(None).alias == "home"

    def test_empty_string_resolves_to_default(self) -> None:
        assert _registry().resolve("").alias == "home"

    def test_explicit_alias(self) -> None:
        account = _registry().resolve("work")
        assert account == Account(alias="work", token_path="/etc/tokens/work")

    def test_unknown_alias(self) -> None:
        with pytest.raises(UnknownAccountError) as exc_info:
            _registry().resolve("nope")
        err = exc_info.value
        assert err.code == "UNKNOWN_ACCOUNT"
        assert err.alias == "nope"
        assert "nope" in err.message
        assert "home, work" in err.message


class TestListing:
    def test_default_alias(self) -> None:
        assert _registry().default_alias == "home"

    def test_aliases_sorted(self) -> None:
        assert _registry().aliases() == ["home", "work"]

    def test_accounts_in_alias_order(self) -> None:
        assert [a.alias for a in _registry().accounts()] == ["home", "work"]


class TestAccount:
    def test_expanded_token_path_expands_tilde(self) -> None:
        account = Account(alias="home", token_path="~/tokens/home")
        assert account.expanded_token_path == Path.home() / "tokens" / "home"

    def test_absolute_path_unchanged(self) -> None:
        account = Account(alias="work", token_path="/etc/tokens/work")
        assert account.expanded_token_path == Path("/etc/tokens/work")
