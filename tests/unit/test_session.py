from __future__ import annotations

import pytest

from tmuxer.errors import SessionCommandError
from tmuxer.session import MAX_CHECKS, ensure_session, find_session
from tests.helpers import FakeMultiplexer, make_project


@pytest.mark.parametrize(
    ("sessions", "name", "expected"),
    [
        (["project-a"], "project-a", "project-a"),
        (["project-a-old", "project-a"], "project-a", "project-a"),
        (["work-project-a", "other"], "project-a", "work-project-a"),
        (["other"], "project-a", None),
        ([], "project-a", None),
    ],
)
def test_find_session(sessions: list[str], name: str, expected: str | None) -> None:
    assert find_session(sessions, name) == expected


def test_existing_session_is_attached_outside_tmux() -> None:
    mux = FakeMultiplexer(["project-a"])

    assert ensure_session(make_project(), mux, inside_client=False) == "project-a"
    assert mux.calls == [("list_sessions",), ("attach_session", "project-a")]


def test_existing_session_is_switched_to_inside_tmux() -> None:
    mux = FakeMultiplexer(["project-a"])

    ensure_session(make_project(), mux, inside_client=True)
    assert mux.calls == [("list_sessions",), ("switch_client", "project-a")]


def test_substring_match_targets_the_existing_session() -> None:
    mux = FakeMultiplexer(["work-project-a"])

    assert ensure_session(make_project(), mux, inside_client=False) == "work-project-a"
    assert "new_session" not in mux.names()
    assert mux.calls[-1] == ("attach_session", "work-project-a")


def test_missing_session_is_created_once_then_attached() -> None:
    mux = FakeMultiplexer([])
    project = make_project()

    ensure_session(project, mux, inside_client=False)
    assert mux.calls == [
        ("list_sessions",),
        ("new_session", "project-a", project.full_path),
        ("list_sessions",),
        ("attach_session", "project-a"),
    ]


def test_creation_is_never_retried() -> None:
    """If the new session never shows up, fail after one creation attempt."""
    mux = FakeMultiplexer([], register_created=False)

    with pytest.raises(SessionCommandError):
        ensure_session(make_project(), mux, inside_client=False)

    assert mux.names().count("new_session") == 1
    assert mux.names().count("list_sessions") == MAX_CHECKS
    assert "attach_session" not in mux.names()


def test_session_name_is_sanitized() -> None:
    mux = FakeMultiplexer([])
    project = make_project(name="example.com", full_path="/srv/example.com")

    ensure_session(project, mux, inside_client=True)
    assert ("new_session", "example_com", "/srv/example.com") in mux.calls
    assert mux.calls[-1] == ("switch_client", "example_com")


@pytest.mark.parametrize(
    ("fail_on", "expected_calls"),
    [
        ("list_sessions", ["list_sessions"]),
        ("new_session", ["list_sessions", "new_session"]),
        ("attach_session", ["list_sessions", "new_session", "list_sessions", "attach_session"]),
    ],
)
def test_command_failures_propagate(fail_on: str, expected_calls: list[str]) -> None:
    mux = FakeMultiplexer([], fail_on=fail_on)

    with pytest.raises(SessionCommandError):
        ensure_session(make_project(), mux, inside_client=False)
    assert mux.names() == expected_calls
