"""Error types surfaced to the user by the tmuxer CLI."""

from __future__ import annotations


class TmuxerError(Exception):
    """Base class for all errors tmuxer reports and exits on."""


class ConfigLoadError(TmuxerError):
    """The configuration file exists but could not be read or parsed."""


class HomeResolutionError(TmuxerError):
    """The user's home directory could not be determined."""


class NoProjectBaseError(TmuxerError):
    """No project base pattern was configured."""

    def __init__(self, message: str = "No project base path provided") -> None:
        super().__init__(message)


class WalkError(TmuxerError):
    """A single base pattern could not be walked."""


class PatternError(WalkError):
    """A base pattern is malformed (unbalanced braces or brackets)."""


class SelectionCancelledError(TmuxerError):
    """The user closed the project picker without choosing anything."""

    def __init__(self, message: str = "No project selected") -> None:
        super().__init__(message)


class SessionCommandError(TmuxerError):
    """A tmux command failed to run or exited unsuccessfully."""
