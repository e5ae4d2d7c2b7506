"""CommandExecutor: runs gh with an injected credential under a deadline.

Every child runs in its own session, so the child and any descendants holding
its pipes form one process group. _spawn() is the only place a child is
created; its finally block kills and reaps the group on every exit path that
leaves it running (timeout, cancellation, unexpected error).
"""

from __future__ import annotations

import asyncio
import os
import shutil
import signal
import time
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog

from src.constants import CHILD_ENV_OVERRIDES, CREDENTIAL_ENV_VAR, GH_BINARY, GH_INSTALL_HINT
from src.infra.errors import ExecutionFailure, GhNotFoundError, ToolTimeoutError

logger = structlog.get_logger()


@dataclass(frozen=True)
class ExecutionResult:
    """Raw outcome of one gh invocation. Success is judged by the transformer."""

    exit_code: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class CommandExecutor:
    def __init__(
        self,
        binary: str = GH_BINARY,
        *,
        kill_grace_s: float = 2.0,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self._binary = binary
        self._kill_grace_s = kill_grace_s
        self._base_env = base_env

    @property
    def binary(self) -> str:
        return self._binary

    def find_binary(self) -> str:
        """Absolute path of the binary. Raises GhNotFoundError if absent."""
        path = shutil.which(self._binary)
        if path is None:
            raise GhNotFoundError(f"{self._binary} CLI not found. {GH_INSTALL_HINT}")
        return path

    def _child_env(self, credential: str | None) -> dict[str, str]:
        env = dict(os.environ if self._base_env is None else self._base_env)
        env.update(CHILD_ENV_OVERRIDES)
        if credential is not None:
            env[CREDENTIAL_ENV_VAR] = credential
        else:
            env.pop(CREDENTIAL_ENV_VAR, None)
        return env

    async def execute(
        self, args: Sequence[str], credential: str | None, timeout: float
    ) -> ExecutionResult:
        """Run ``binary *args`` with the credential in the environment only.

        Returns an ExecutionResult for any exit code. Raises ToolTimeoutError
        after killing the child if it outlives ``timeout`` seconds, and
        ExecutionFailure if it cannot be spawned.
        """
        return await self._run([self._binary, *args], self._child_env(credential), timeout)

    async def version(self, timeout: float = 10.0) -> str:
        """First line of ``gh --version``, run without any credential."""
        result = await self._run([self._binary, "--version"], self._child_env(None), timeout)
        if not result.ok:
            raise ExecutionFailure(
                f"Failed to get {self._binary} version", exit_code=result.exit_code
            )
        lines = result.stdout_text().splitlines()
        return lines[0].strip() if lines else "unknown"

    async def _run(
        self, argv: list[str], env: dict[str, str], timeout: float
    ) -> ExecutionResult:
        started = time.monotonic()
        # argv only: env holds the credential and is never logged.
        logger.debug("command_started", argv=argv, timeout_s=timeout)
        async with self._spawn(argv, env) as proc:
            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
            except TimeoutError:
                logger.warning(
                    "command_timed_out",
                    argv=argv[:3],
                    pid=proc.pid,
                    timeout_s=timeout,
                )
                raise ToolTimeoutError(
                    f"{self._binary} {argv[1] if len(argv) > 1 else ''} timed out "
                    f"after {timeout:g}s and was terminated"
                ) from None

        elapsed_ms = int((time.monotonic() - started) * 1000)
        exit_code = proc.returncode if proc.returncode is not None else -1
        logger.debug("command_finished", argv=argv[:3], exit_code=exit_code, elapsed_ms=elapsed_ms)
        return ExecutionResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

    @asynccontextmanager
    async def _spawn(
        self, argv: list[str], env: dict[str, str]
    ) -> AsyncIterator[asyncio.subprocess.Process]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                start_new_session=True,
            )
        except FileNotFoundError:
            raise ExecutionFailure(
                f"Failed to spawn {argv[0]}: not found. {GH_INSTALL_HINT}",
                code="GH_NOT_FOUND",
            ) from None
        except OSError as e:
            raise ExecutionFailure(f"Failed to spawn {argv[0]}: {e.strerror or e}") from None

        finished = False
        try:
            yield proc
            finished = True
        finally:
            # A reaped leader can leave descendants holding the pipes.
            if not finished or proc.returncode is None:
                await self._terminate(proc)

    async def _terminate(self, proc: asyncio.subprocess.Process) -> None:
        """SIGTERM the group, SIGKILL after the grace period, always reap.

        The group is signalled even when the leader has already exited.
        """
        _signal_group(proc.pid, signal.SIGTERM)
        try:
            if proc.returncode is None:
                await asyncio.wait_for(proc.wait(), self._kill_grace_s)
        except TimeoutError:
            _signal_group(proc.pid, signal.SIGKILL)
            await proc.wait()
        finally:
            # Descendants may outlive the group leader.
            _signal_group(proc.pid, signal.SIGKILL)
        logger.info("command_terminated", pid=proc.pid, exit_code=proc.returncode)


def _signal_group(pgid: int, sig: signal.Signals) -> None:
    try:
        os.killpg(pgid, sig)
    except (ProcessLookupError, PermissionError):
        pass
