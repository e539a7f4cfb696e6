from __future__ import annotations

import pytest

from tmuxer.app import pick_project, rank
from tmuxer.errors import SelectionCancelledError
from tests.helpers import make_project

LABELS = ["project-a", "project-b", "other"]


def test_rank_empty_query_keeps_order() -> None:
    assert rank("", LABELS) == [0, 1, 2]


def test_rank_filters_non_matches() -> None:
    assert rank("prb", LABELS) == [1]
    assert rank("zzz", LABELS) == []


def test_rank_is_case_insensitive() -> None:
    assert rank("OTH", LABELS) == [2]


def test_pick_project_returns_chosen() -> None:
    projects = [make_project(name=n, full_path=f"/p/{n}") for n in LABELS]
    seen = {}

    def chooser(labels, previews):
        seen["labels"] = labels
        seen["previews"] = previews
        return 2

    assert pick_project(projects, chooser=chooser) is projects[2]
    assert seen["labels"] == LABELS
    assert seen["previews"][0].startswith("Name: project-a\nFull Path: /p/project-a")


def test_pick_project_cancelled() -> None:
    with pytest.raises(SelectionCancelledError, match="No project selected"):
        pick_project([make_project()], chooser=lambda labels, previews: None)
