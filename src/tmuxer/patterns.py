"""Path normalization, base/glob splitting and glob walking.

Patterns always use ``/`` as separator and support:

- ``**``: zero or more directory levels
- ``*`` and ``?``: any run of characters / any single character in a segment
- ``[abc]``, ``[a-z]``, ``[!x]``, ``[^x]``: character classes
- ``{a,b}``: brace alternation, nested groups allowed

A backslash escapes the following character.
"""

from __future__ import annotations

import os
import posixpath
import re
from collections.abc import Callable, Iterator
from functools import lru_cache
from pathlib import Path

from loguru import logger

from tmuxer.errors import HomeResolutionError, PatternError, WalkError
from tmuxer.models import BasePatternSplit

HOME_TOKENS = ("${HOME}", "$HOME", "~")
GLOB_CHARS = frozenset("*?[{")

_GLOB_SEGMENT_RE = re.compile(r"(\*|\*\*|\?|\[.*\]|\{[^}]*\})")
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def home_dir() -> str:
    """Return the user's home directory or raise HomeResolutionError."""
    try:
        home = str(Path.home())
    except (RuntimeError, KeyError) as exc:
        raise HomeResolutionError(f"Cannot determine home directory: {exc}") from exc
    if not home or home.startswith("~"):
        raise HomeResolutionError("Cannot determine home directory")
    return home


def normalize_path(path: str) -> str:
    """Expand a leading ``~``/``$HOME``/``${HOME}`` and make *path* absolute.

    ``.`` and ``..`` segments are collapsed; symlinks are left alone.
    Glob characters pass through untouched, so this works on patterns too.
    """
    for token in HOME_TOKENS:
        if path == token or path.startswith(token + "/"):
            rest = path[len(token):].lstrip("/")
            path = os.path.join(home_dir(), rest)
            break
    return os.path.abspath(path)


def is_glob_segment(segment: str) -> bool:
    """True if *segment* contains unescaped wildcard, class or brace syntax."""
    return _GLOB_SEGMENT_RE.search(_ESCAPE_RE.sub("", segment)) is not None


def _unescape(text: str) -> str:
    return _ESCAPE_RE.sub(r"\1", text)


def split_pattern(pattern: str) -> BasePatternSplit:
    """Split *pattern* into a glob-free base directory and a glob suffix.

    The split happens at the last ``/`` before the first glob
    metacharacter, so ``/home/u/code/**/{.git}`` becomes
    ``/home/u/code`` + ``**/{.git}`` and a fully literal
    ``/home/u/code/dotfiles`` becomes ``/home/u/code`` + ``dotfiles``.
    """
    split_idx = -1
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "/":
            split_idx = i
        elif c in GLOB_CHARS:
            break
        i += 1

    if split_idx == 0:
        base_dir, suffix = "/", pattern[1:]
    elif split_idx > 0:
        base_dir, suffix = pattern[:split_idx], pattern[split_idx + 1:]
    else:
        base_dir, suffix = ".", pattern

    return BasePatternSplit(
        base_dir=_unescape(base_dir),
        suffix=suffix,
        is_glob=is_glob_segment(posixpath.basename(suffix)),
    )


def _find_unescaped(text: str, char: str) -> int:
    i = 0
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == char:
            return i
        i += 1
    return -1


def expand_braces(pattern: str) -> list[str]:
    """Expand every ``{a,b}`` group in *pattern*, preserving option order.

    ``{x}`` with a single option expands to ``x``.  Raises PatternError on
    unbalanced braces.
    """
    start = _find_unescaped(pattern, "{")
    if start == -1:
        if _find_unescaped(pattern, "}") != -1:
            raise PatternError(f"Unbalanced '}}' in pattern: {pattern}")
        return [pattern]

    options: list[str] = []
    depth = 0
    last = start + 1
    i = start
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[last:i])
                break
        elif c == "," and depth == 1:
            options.append(pattern[last:i])
            last = i + 1
        i += 1
    else:
        raise PatternError(f"Unbalanced '{{' in pattern: {pattern}")

    prefix, rest = pattern[:start], pattern[i + 1:]
    expanded: list[str] = []
    for option in options:
        for result in expand_braces(prefix + option + rest):
            if result not in expanded:
                expanded.append(result)
    return expanded


def _class_body(body: str) -> str:
    out = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            out.append(re.escape(body[i + 1]))
            i += 2
            continue
        out.append("-" if c == "-" else re.escape(c))
        i += 1
    return "".join(out)


@lru_cache(maxsize=256)
def segment_regex(segment: str) -> re.Pattern[str]:
    """Compile a single path segment (no ``/``, no braces) to a regex."""
    out = []
    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        if c == "\\" and i + 1 < n:
            out.append(re.escape(segment[i + 1]))
            i += 2
            continue
        if c == "*":
            out.append(".*")
        elif c == "?":
            out.append(".")
        elif c == "[":
            j = i + 1
            negate = j < n and segment[j] in "!^"
            if negate:
                j += 1
            start = j
            # ']' right after the opening bracket is a literal member
            if j < n and segment[j] == "]":
                j += 1
            while j < n and segment[j] != "]":
                if segment[j] == "\\":
                    j += 1
                j += 1
            if j >= n:
                raise PatternError(f"Unclosed '[' in pattern segment: {segment}")
            out.append("[" + ("^" if negate else "") + _class_body(segment[start:j]) + "]")
            i = j + 1
            continue
        else:
            out.append(re.escape(c))
        i += 1
    try:
        return re.compile("".join(out), re.DOTALL)
    except re.error as exc:
        raise PatternError(f"Invalid pattern segment {segment!r}: {exc}") from exc


def _is_literal(segment: str) -> bool:
    return all(_find_unescaped(segment, c) == -1 for c in "*?[")


def _join(rel: str, name: str) -> str:
    return f"{rel}/{name}" if rel else name


def _is_dir(entry: os.DirEntry, follow_symlinks: bool) -> bool:
    try:
        return entry.is_dir(follow_symlinks=follow_symlinks)
    except OSError:
        return False


def _scan(base_dir: str, rel: str) -> list[os.DirEntry]:
    path = os.path.join(base_dir, rel) if rel else base_dir
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        if not rel:
            raise WalkError(f"Cannot read base directory {base_dir}: {exc}") from exc
        logger.warning("Skipping unreadable directory {}: {}", path, exc)
        return []


def _walk(
    base_dir: str,
    rel: str,
    segments: list[str],
    prune: Callable[[str], bool] | None,
) -> Iterator[str]:
    segment, rest = segments[0], segments[1:]

    if segment == "**":
        # zero levels
        if rest:
            yield from _walk(base_dir, rel, rest, prune)
        elif rel:
            yield rel
        for entry in _scan(base_dir, rel):
            child = _join(rel, entry.name)
            if _is_dir(entry, follow_symlinks=False):
                if prune is None or not prune(child):
                    yield from _walk(base_dir, child, segments, prune)
            elif not rest:
                yield child
        return

    if _is_literal(segment):
        child = _join(rel, _unescape(segment))
        path = os.path.join(base_dir, child)
        if not rest:
            if os.path.lexists(path):
                yield child
        elif os.path.isdir(path) and (prune is None or not prune(child)):
            yield from _walk(base_dir, child, rest, prune)
        return

    regex = segment_regex(segment)
    for entry in _scan(base_dir, rel):
        if regex.fullmatch(entry.name) is None:
            continue
        child = _join(rel, entry.name)
        if not rest:
            yield child
        elif _is_dir(entry, follow_symlinks=True) and (prune is None or not prune(child)):
            yield from _walk(base_dir, child, rest, prune)


def _segments(pattern: str) -> list[str]:
    segments: list[str] = []
    for seg in pattern.split("/"):
        if not seg or (seg == "**" and segments and segments[-1] == "**"):
            continue
        segments.append(seg)
    return segments


def glob_walk(
    base_dir: str,
    pattern: str,
    prune: Callable[[str], bool] | None = None,
) -> Iterator[str]:
    """Yield ``/``-separated paths under *base_dir* that match *pattern*.

    *prune* is called with the relative path of every intermediate
    directory before descending into it; returning True skips the subtree.
    Each match is yielded once even if several brace expansions reach it.
    """
    expansions = [_segments(p) for p in expand_braces(pattern)]
    for segments in expansions:
        for seg in segments:
            if seg != "**" and not _is_literal(seg):
                segment_regex(seg)

    if not os.path.isdir(base_dir):
        raise WalkError(f"Base directory does not exist: {base_dir}")

    seen: set[str] = set()
    for segments in expansions:
        if not segments:
            continue
        logger.debug("Walking {} for {}", base_dir, "/".join(segments))
        for match in _walk(base_dir, "", segments, prune):
            if match not in seen:
                seen.add(match)
                yield match
