"""Data models for tmuxer."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MARKERS = (".git",)

# tmux refuses ':' in session names and silently rewrites '.'
_SESSION_NAME_TRANS = str.maketrans({".": "_", ":": "_"})


def session_name_for(name: str) -> str:
    """Return *name* as a tmux-safe session identifier."""
    return name.translate(_SESSION_NAME_TRANS)


@dataclass(frozen=True)
class Project:
    name: str
    full_path: str
    home_path: str  # full_path relative to the user's home directory

    @property
    def session_name(self) -> str:
        return session_name_for(self.name)

    def preview(self) -> str:
        return (
            f"Name: {self.name}\n"
            f"Full Path: {self.full_path}\n"
            f"Home Path: {self.home_path}"
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "full_path": self.full_path,
            "home_path": self.home_path,
            "session_name": self.session_name,
        }


@dataclass(frozen=True)
class Config:
    bases: tuple[str, ...] = ()
    markers: tuple[str, ...] = DEFAULT_MARKERS
    ignore: tuple[str, ...] = ()


@dataclass(frozen=True)
class BasePatternSplit:
    base_dir: str
    suffix: str
    is_glob: bool
