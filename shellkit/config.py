"""YAML config parsing, defaults, validation."""

from __future__ import annotations

import codecs
import os

import yaml

from shellkit.models import DEFAULT_READ_SIZE, DEFAULT_SHELL, ShellConfig, TraceConfig


CONFIG_ENV = "SHELLKIT_CONFIG"
DEFAULT_CONFIG = ".shellkit.yaml"

_TOP_KEYS = {"version", "shell", "read_size", "encoding", "trace"}
_TRACE_KEYS = {"enabled", "file"}


class ConfigError(Exception):
    pass


def validate_version(raw: dict) -> None:
    version = raw.get("version")
    if not version:
        raise ConfigError("Missing 'version' field in config")
    if str(version) not in ("1.0", "1"):
        raise ConfigError(f"Unsupported config version: {version}")


def _check_keys(section: str, raw: dict, allowed: set[str]) -> None:
    unknown = set(raw.keys()) - allowed
    if unknown:
        raise ConfigError(
            f"{section}: unknown key(s): {', '.join(sorted(unknown))}"
        )


def parse_trace(raw) -> TraceConfig:
    if raw is None:
        return TraceConfig()
    if isinstance(raw, bool):                # shorthand: trace: true
        return TraceConfig(enabled=raw)
    if not isinstance(raw, dict):
        raise ConfigError("'trace' must be a boolean or a mapping")
    _check_keys("trace", raw, _TRACE_KEYS)
    trace_file = raw.get("file")
    return TraceConfig(
        # a file implies tracing unless explicitly switched off
        enabled=bool(raw.get("enabled", trace_file is not None)),
        file=str(trace_file) if trace_file is not None else None,
    )


def parse_config(raw: dict) -> ShellConfig:
    _check_keys("config", raw, _TOP_KEYS)

    shell = str(raw.get("shell", DEFAULT_SHELL))
    if not os.path.isabs(shell):
        raise ConfigError(f"'shell' must be an absolute path, got: {shell}")

    read_size = raw.get("read_size", DEFAULT_READ_SIZE)
    if isinstance(read_size, bool) or not isinstance(read_size, int) or read_size <= 0:
        raise ConfigError(f"'read_size' must be a positive integer, got: {read_size!r}")

    encoding = str(raw.get("encoding", "utf-8"))
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ConfigError(f"Unknown encoding: {encoding}")

    return ShellConfig(
        shell=shell,
        read_size=read_size,
        encoding=encoding,
        trace=parse_trace(raw.get("trace")),
    )


def load_config(path: str) -> ShellConfig:
    """Load and validate a .shellkit.yaml file."""
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e.strerror}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not raw:
        raise ConfigError(f"Empty config file: {path}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a mapping: {path}")

    validate_version(raw)
    return parse_config(raw)


def find_config() -> str | None:
    """Locate a config file: $SHELLKIT_CONFIG, then ./.shellkit.yaml."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return env_path
    if os.path.isfile(DEFAULT_CONFIG):
        return DEFAULT_CONFIG
    return None


def load_default_config() -> ShellConfig:
    path = find_config()
    if path is None:
        return ShellConfig()
    return load_config(path)
