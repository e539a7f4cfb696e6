from __future__ import annotations

from pathlib import Path

from tmuxer.errors import SessionCommandError
from tmuxer.models import Project


def make_tree(root: Path, entries: list[str]) -> None:
    """Create *entries* under *root*; names ending in '/' are directories."""
    root.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        path = root / entry
        if entry.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")


def make_project(**overrides) -> Project:
    data = {
        "name": "project-a",
        "full_path": "/home/u/code/project-a",
        "home_path": "code/project-a",
    }
    data.update(overrides)
    return Project(**data)


class FakeMultiplexer:
    """Records calls; new_session adds the session unless told not to."""

    def __init__(
        self,
        sessions: list[str] | None = None,
        *,
        register_created: bool = True,
        fail_on: str | None = None,
    ) -> None:
        self.sessions = list(sessions or [])
        self.register_created = register_created
        self.fail_on = fail_on
        self.calls: list[tuple] = []

    def _record(self, *call) -> None:
        self.calls.append(call)
        if call[0] == self.fail_on:
            raise SessionCommandError(f"{call[0]} failed")

    def list_sessions(self) -> list[str]:
        self._record("list_sessions")
        return list(self.sessions)

    def new_session(self, name: str, cwd: str) -> None:
        self._record("new_session", name, cwd)
        if self.register_created:
            self.sessions.append(name)

    def attach_session(self, name: str) -> None:
        self._record("attach_session", name)

    def switch_client(self, name: str) -> None:
        self._record("switch_client", name)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]
