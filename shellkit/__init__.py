"""shellkit — build shell command lines safely and run them."""

from __future__ import annotations

from shellkit.command import format_command, format_command_no_subst
from shellkit.escape import (
    PASSTHROUGH,
    Argument,
    shell_escape,
    shell_escape_many,
    shell_escape_many_no_subst,
    shell_escape_no_subst,
)
from shellkit.executors import (
    CommandFailedError,
    PipeExecutor,
    ResourceAcquisitionError,
    ShellError,
    ShellExecutor,
    WaitMismatchError,
    shell_wait,
)
from shellkit.seed import random_seed_from_string

__version__ = "1.0.0"


def shell_exec(*args: Argument) -> None:
    """Run a command, allowing shell substitutions. Raises on failure."""
    ShellExecutor().exec(*args)


def shell_exec_no_subst(*args: Argument) -> None:
    ShellExecutor().exec_no_subst(*args)


def read_popen(command: str) -> str:
    """Run a raw command line and return everything it wrote to stdout."""
    return PipeExecutor().read_popen(command)


def shell_read(*args: Argument) -> str:
    """Run a command, allowing shell substitutions, and capture its stdout."""
    return PipeExecutor().read(*args)


def shell_read_no_subst(*args: Argument) -> str:
    return PipeExecutor().read_no_subst(*args)


__all__ = [
    "PASSTHROUGH",
    "CommandFailedError",
    "PipeExecutor",
    "ResourceAcquisitionError",
    "ShellError",
    "ShellExecutor",
    "WaitMismatchError",
    "__version__",
    "format_command",
    "format_command_no_subst",
    "random_seed_from_string",
    "read_popen",
    "shell_escape",
    "shell_escape_many",
    "shell_escape_many_no_subst",
    "shell_escape_no_subst",
    "shell_exec",
    "shell_exec_no_subst",
    "shell_read",
    "shell_read_no_subst",
    "shell_wait",
]
