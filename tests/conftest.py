"""Shared pytest fixtures for the GitHub tool server tests.

Nothing here touches the network or a real gh binary: dispatch tests use
FakeExecutor, and subprocess tests use sys.executable as the stand-in binary.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.accounts.config import AccountsConfig, load_config
from src.accounts.credentials import CredentialStore
from src.accounts.registry import AccountRegistry
from src.config.settings import ExecutorSettings, LogSettings, Settings
from src.gateway.dispatch import AppContext, Dispatcher
from src.infra.redaction import SecretRegistry, known_secrets
from src.tools.builtins import build_registry
from src.tools.registry import ToolRegistry
from tests.helpers import HOME_TOKEN, WORK_TOKEN, FakeExecutor


@pytest.fixture(autouse=True)
def _clear_known_secrets():
    yield
    known_secrets.clear()


@pytest.fixture
def token_dir(tmp_path: Path) -> Path:
    d = tmp_path / "tokens"
    d.mkdir()
    (d / "home").write_text(f"{HOME_TOKEN}\n", encoding="utf-8")
    (d / "work").write_text(f"  {WORK_TOKEN}  \n", encoding="utf-8")
    return d


@pytest.fixture
def config_file(tmp_path: Path, token_dir: Path) -> Path:
    """home (default) and work have tokens; broken points at a missing file."""
    path = tmp_path / "multi-account-github-mcp.yml"
    path.write_text(
        "default_account: home\n"
        "accounts:\n"
        f"  home:\n    token_path: {token_dir / 'home'}\n"
        f"  work:\n    token_path: {token_dir / 'work'}\n"
        f"  broken:\n    token_path: {token_dir / 'missing'}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def accounts_config(config_file: Path) -> AccountsConfig:
    return load_config(config_file)


@pytest.fixture
def account_registry(accounts_config: AccountsConfig) -> AccountRegistry:
    return AccountRegistry(accounts_config)


@pytest.fixture
def tool_registry() -> ToolRegistry:
    return build_registry()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        executor=ExecutorSettings(default_timeout_s=30, download_timeout_s=300, kill_grace_s=0.5),
        log=LogSettings(),
    )


@pytest.fixture
def make_dispatcher(
    settings: Settings, account_registry: AccountRegistry, tool_registry: ToolRegistry
):
    """Factory: Dispatcher wired to real accounts/tools and the given executor."""

    def _make(executor: FakeExecutor, *, tools: ToolRegistry | None = None) -> Dispatcher:
        ctx = AppContext(
            settings=settings,
            accounts=account_registry,
            credentials=CredentialStore(secrets=SecretRegistry()),
            tools=tools or tool_registry,
            executor=executor,  # type: ignore[arg-type]
        )
        return Dispatcher(ctx)

    return _make
