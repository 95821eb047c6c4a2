# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading, layering and writing devpair.toml data.

Layers are plain nested dicts until the very end, when ``Config`` wraps the
merged result. ``DEVPAIR_*`` environment variables and ``config set``
arguments share ``parse_string_value`` so both spell values the same way.
"""

import json
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from devpair.exceptions import ConfigLoadError

ENV_PREFIX = "DEVPAIR_"

# Variables that steer the process itself rather than a config key
RESERVED_ENV_NAMES = frozenset({"CONTROL_PORT", "DEBUG", "LOG_LEVEL", "STRICT_CONFIG"})

ConfigDict = dict[str, Any]  # pyright: ignore[reportExplicitAny]


def read_toml_file(path: Path) -> ConfigDict:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: The file is missing.
        ConfigLoadError: The file is not valid TOML. Carries the path and,
            where the parser reports them, the line and column.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"{path} is not valid TOML: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Copy nested tables and arrays; scalars are shared."""
    if isinstance(value, dict):
        return {key: copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def deep_merge(base: ConfigDict, override: ConfigDict) -> ConfigDict:
    """Layer ``override`` on top of ``base`` and return a fresh dict.

    Tables present on both sides merge key by key. Anything else in
    ``override`` (scalars, arrays, a table replacing a scalar) wins
    outright. Neither argument is mutated.
    """
    merged = {key: copy_value(value) for key, value in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy_value(value)
    return merged


def parse_string_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Turn a command-line or environment string into a TOML-like value.

    ``true``/``false`` in any case become booleans. Digits become an int,
    or a float when there is a dot. ``[...]`` and ``{...}`` are tried as
    JSON. Everything else, including text that fails those conversions,
    stays a string.

    Examples:
        >>> parse_string_value("5173")
        5173
        >>> parse_string_value("npm run dev")
        'npm run dev'
    """
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"

    number_type = float if "." in value else int
    try:
        return number_type(value)
    except ValueError:
        pass

    bracketed = (value[:1], value[-1:]) in {("[", "]"), ("{", "}")}
    if bracketed:
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: ConfigDict,
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Store ``value`` under a dotted key such as ``profiles.dev.backend``.

    Missing tables are created. A scalar sitting where a table is needed is
    replaced by one.
    """
    *tables, leaf = key_path.split(".")
    target = d
    for name in tables:
        child = target.get(name)
        if not isinstance(child, dict):
            child = target[name] = {}
        target = child
    target[leaf] = value


def parse_env_vars(prefix: str = ENV_PREFIX) -> ConfigDict:
    """Collect ``DEVPAIR_*`` variables into a nested config layer.

    A double underscore separates tables, so ``DEVPAIR_SUPERVISOR__RESTART_LIMIT=5``
    sets ``supervisor.restart_limit``. Names in ``RESERVED_ENV_NAMES`` are
    skipped.
    """
    layer: ConfigDict = {}
    for name, raw in os.environ.items():
        if not name.startswith(prefix):
            continue
        key = name.removeprefix(prefix)
        if key and key not in RESERVED_ENV_NAMES:
            set_nested_key(layer, key.replace("__", ".").lower(), parse_string_value(raw))
    return layer


def write_config_value(
    path: Path,
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> ConfigDict:
    """Store one dotted key in a TOML file, keeping everything else in it.

    Creates the file and its parent directories when needed.

    Returns:
        The complete data written.

    Raises:
        ConfigLoadError: The existing file is not valid TOML.
    """
    data = read_toml_file(path) if path.is_file() else {}
    set_nested_key(data, key_path, value)

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)
    return data
