"""Run options: YAML config file merged with command-line flags."""
import os
from dataclasses import dataclass, field

import yaml

from .discovery import SKIP_CHOICES
from .errors import SetupError


@dataclass
class Options:
    fix: bool = False
    jars: list = field(default_factory=list)
    search_paths: list = field(default_factory=list)
    skip: list = field(default_factory=list)
    verbosity: int = 0


def load_config(config_path: str) -> dict:
    try:
        with open(config_path) as f:
            raw = f.read()
    except OSError as exc:
        raise SetupError(f"unable to read config ({exc.strerror})", config_path) from exc
    for key, val in os.environ.items():
        raw = raw.replace(f"${{{key}}}", val)
    try:
        config = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise SetupError("invalid YAML config", config_path) from exc
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise SetupError("config must be a mapping", config_path)
    return config


def resolve_jar(path: str) -> str:
    """Absolute path for a -j jar; its directory has to exist."""
    directory = os.path.dirname(path) or "."
    if not os.path.isdir(directory):
        raise SetupError("no such directory", directory)
    return os.path.join(os.path.abspath(directory), os.path.basename(path))


def resolve_search_path(path: str) -> str:
    if not os.path.isdir(path):
        raise SetupError("no such directory", path)
    return os.path.abspath(path)


def _as_list(value, key: str, config_path: str) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    raise SetupError(f"'{key}' must be a string or a list", config_path)


def build_options(config: dict, config_path: str = "", fix: bool = False,
                  jars=(), search_paths=(), skip=(), verbosity: int = 0) -> Options:
    """Config file values first, then command-line values on top."""
    config_skip = _as_list(config.get("skip"), "skip", config_path)
    for name in config_skip:
        if name not in SKIP_CHOICES:
            raise SetupError(f"unknown check to skip '{name}'", config_path)
    try:
        config_verbosity = int(config.get("verbosity", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise SetupError("'verbosity' must be an integer", config_path) from exc
    return Options(
        fix=bool(config.get("fix", False)) or fix,
        jars=[resolve_jar(j) for j in
              _as_list(config.get("jars"), "jars", config_path) + list(jars)],
        search_paths=[resolve_search_path(p) for p in
                      _as_list(config.get("search_paths"), "search_paths", config_path)
                      + list(search_paths)],
        skip=config_skip + list(skip),
        verbosity=config_verbosity + verbosity,
    )
