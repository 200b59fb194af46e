"""Data classes for executor configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


DEFAULT_SHELL = "/bin/sh"
DEFAULT_READ_SIZE = 8192          # C BUFSIZ on glibc


@dataclass
class TraceConfig:
    enabled: bool = False
    file: str | None = None       # append plain-text trace here too


@dataclass
class ShellConfig:
    shell: str = DEFAULT_SHELL    # absolute path, invoked as `shell -c LINE`
    read_size: int = DEFAULT_READ_SIZE
    encoding: str = "utf-8"       # decoding of captured output
    trace: TraceConfig = field(default_factory=TraceConfig)
