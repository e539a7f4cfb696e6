"""Create, attach or switch to the tmux session for a project.

The flow is a small state machine:

    no session --new-session--> session exists --attach/switch--> done

Creation happens at most once per call; if the freshly created session is
still not listed on the second check, SessionCommandError is raised.
"""

from __future__ import annotations

from loguru import logger

from tmuxer.errors import SessionCommandError
from tmuxer.models import Project
from tmuxer.tmux import Multiplexer

# One check before creating the session, one after.
MAX_CHECKS = 2


def find_session(sessions: list[str], name: str) -> str | None:
    """Return the session that belongs to *name*.

    An exact match wins; otherwise the first session whose name contains
    *name* is used.
    """
    if name in sessions:
        return name
    for session in sessions:
        if name in session:
            return session
    return None


def ensure_session(project: Project, mux: Multiplexer, *, inside_client: bool) -> str:
    """Attach to (or switch to) the project's session, creating it once if needed.

    Returns the name of the session that was attached or switched to.
    """
    name = project.session_name
    created = False

    for _ in range(MAX_CHECKS):
        target = find_session(mux.list_sessions(), name)
        if target is not None:
            if inside_client:
                logger.debug("Switching client to {}", target)
                mux.switch_client(target)
            else:
                logger.debug("Attaching to {}", target)
                mux.attach_session(target)
            return target

        if created:
            break
        logger.debug("Creating session {} in {}", name, project.full_path)
        mux.new_session(name, project.full_path)
        created = True

    raise SessionCommandError(f"Session {name!r} not found after creating it")
