"""Loading, merging and normalizing the tmuxer configuration."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import yaml
from loguru import logger

from tmuxer.errors import ConfigLoadError, HomeResolutionError, NoProjectBaseError
from tmuxer.models import DEFAULT_MARKERS, Config
from tmuxer.patterns import normalize_path


def _string_list(data: dict, key: str, path: str) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigLoadError(f"{path}: '{key}' must be a string or a list of strings")


def load_config(path: str) -> Config:
    """Read a YAML config file.

    ``""`` and ``"-"`` mean "no file".  A missing file yields an empty
    config; an unreadable or malformed one raises ConfigLoadError.
    Markers are left empty when the file names none so flag values can
    still take effect; see merge_flags.
    """
    if path in ("", "-"):
        return Config(markers=())

    config_file = Path(path)
    if not config_file.is_file():
        logger.debug("No config file at {}", config_file)
        return Config(markers=())

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"Failed to load config {config_file}: {exc}") from exc

    if data is None:
        return Config(markers=())
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{config_file}: expected a mapping at the top level")

    return Config(
        bases=_string_list(data, "base", str(config_file)),
        markers=_string_list(data, "markers", str(config_file)),
        ignore=_string_list(data, "ignore", str(config_file)),
    )


def merge_flags(
    config: Config,
    bases: list[str] | None = None,
    markers: list[str] | None = None,
    ignore: list[str] | None = None,
) -> Config:
    """Append CLI flag values after the file values.

    Falls back to the default ``.git`` marker when neither source names one.
    """
    merged_markers = config.markers + tuple(markers or ())
    return dataclasses.replace(
        config,
        bases=config.bases + tuple(bases or ()),
        markers=merged_markers or DEFAULT_MARKERS,
        ignore=config.ignore + tuple(ignore or ()),
    )


def normalize_config(config: Config) -> Config:
    """Return *config* with every base home-expanded and absolute.

    A base whose home token cannot be resolved is logged and dropped; the
    remaining bases are still used.
    """
    if not config.bases:
        raise NoProjectBaseError()

    bases: list[str] = []
    for base in config.bases:
        try:
            bases.append(normalize_path(base))
        except HomeResolutionError as exc:
            logger.warning("Skipping base {!r}: {}", base, exc)

    if not bases:
        raise HomeResolutionError("None of the configured base paths could be resolved")
    return dataclasses.replace(config, bases=tuple(bases))
