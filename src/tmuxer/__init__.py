"""tmuxer: fuzzy-pick a project directory and open a tmux session for it."""

__version__ = "0.3.0"
