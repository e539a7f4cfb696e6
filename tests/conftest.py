from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point $HOME at a scratch directory."""
    home_dir = tmp_path / "home" / "u"
    home_dir.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture()
def code_dir(home: Path) -> Path:
    """A ~/code tree with a few git projects, a plain dir and some noise.

    code/
      project-a/.git/
      project-b/.git          (worktree-style .git file)
      group/nested/.git/
      group/nested/node_modules/dep/.git/
      plain/README.md
      .hidden/.hg/
    """
    from tests.helpers import make_tree

    root = home / "code"
    make_tree(
        root,
        [
            "project-a/.git/",
            "project-a/src/main.py",
            "project-b/.git",
            "group/nested/.git/",
            "group/nested/node_modules/dep/.git/",
            "plain/README.md",
            ".hidden/.hg/",
        ],
    )
    return root


@pytest.fixture(autouse=True)
def no_tmux_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of whether they run inside tmux."""
    monkeypatch.delenv("TMUX", raising=False)


@pytest.fixture()
def log_messages():
    """Collect loguru messages emitted during the test."""
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
