"""Thin wrapper around the tmux binary."""

from __future__ import annotations

import shutil
import subprocess
from typing import Protocol

from loguru import logger

from tmuxer.errors import SessionCommandError

DEFAULT_TIMEOUT = 15.0

# Output of `tmux list-sessions` when no server is running yet.
_NO_SERVER_MARKERS = ("no server running", "error connecting to")


class Multiplexer(Protocol):
    """The session commands the orchestrator needs."""

    def list_sessions(self) -> list[str]: ...

    def new_session(self, name: str, cwd: str) -> None: ...

    def attach_session(self, name: str) -> None: ...

    def switch_client(self, name: str) -> None: ...


def is_no_server_output(output: str) -> bool:
    lowered = output.lower()
    return any(marker in lowered for marker in _NO_SERVER_MARKERS)


class TmuxClient:
    """Runs tmux commands via subprocess."""

    def __init__(self, binary: str = "tmux", timeout: float = DEFAULT_TIMEOUT) -> None:
        self.binary = binary
        self.timeout = timeout

    def _command(self, *args: str) -> list[str]:
        binary_path = shutil.which(self.binary)
        if binary_path is None:
            raise SessionCommandError(f"'{self.binary}' not found on PATH")
        return [binary_path, *args]

    def _capture(self, *args: str) -> subprocess.CompletedProcess:
        cmd = self._command(*args)
        logger.debug("Running {}", cmd)
        try:
            return subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise SessionCommandError(
                f"tmux {args[0]} timed out after {self.timeout:g}s"
            ) from exc
        except OSError as exc:
            raise SessionCommandError(f"Failed to run tmux {args[0]}: {exc}") from exc

    def _interactive(self, *args: str) -> None:
        cmd = self._command(*args)
        logger.debug("Running {}", cmd)
        try:
            proc = subprocess.run(cmd)
        except OSError as exc:
            raise SessionCommandError(f"Failed to run tmux {args[0]}: {exc}") from exc
        if proc.returncode != 0:
            raise SessionCommandError(
                f"tmux {args[0]} exited with status {proc.returncode}"
            )

    def list_sessions(self) -> list[str]:
        """Return live session names; an empty list if no server is running."""
        proc = self._capture("list-sessions", "-F", "#{session_name}")
        if proc.returncode != 0:
            output = (proc.stdout or "") + (proc.stderr or "")
            if is_no_server_output(output):
                return []
            raise SessionCommandError(
                f"Failed to list sessions: {output.strip() or f'exit status {proc.returncode}'}"
            )
        return [line.strip() for line in proc.stdout.splitlines() if line.strip()]

    def new_session(self, name: str, cwd: str) -> None:
        proc = self._capture("new-session", "-d", "-s", name, "-c", cwd)
        if proc.returncode != 0:
            message = (proc.stderr or proc.stdout or "").strip()
            raise SessionCommandError(
                f"Failed to create session {name!r}: {message or f'exit status {proc.returncode}'}"
            )

    def attach_session(self, name: str) -> None:
        self._interactive("attach-session", "-t", f"={name}")

    def switch_client(self, name: str) -> None:
        self._interactive("switch-client", "-t", f"={name}")
