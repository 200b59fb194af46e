"""Executors — run formatted command lines through the shell.

  - ShellExecutor → fire-and-forget, stdio inherited (subprocess.run)
  - PipeExecutor  → stdout captured via pipe/fork/exec/wait
"""

from __future__ import annotations

from shellkit.executors.pipe import (
    EXEC_FAILED_STATUS,
    STDERR_FILENO,
    STDIN_FILENO,
    STDOUT_FILENO,
    PipeExecutor,
    shell_wait,
)
from shellkit.executors.result import (
    CommandFailedError,
    ResourceAcquisitionError,
    ShellError,
    WaitMismatchError,
)
from shellkit.executors.shell import ShellExecutor

__all__ = [
    "EXEC_FAILED_STATUS",
    "STDERR_FILENO",
    "STDIN_FILENO",
    "STDOUT_FILENO",
    "CommandFailedError",
    "PipeExecutor",
    "ResourceAcquisitionError",
    "ShellError",
    "ShellExecutor",
    "WaitMismatchError",
    "shell_wait",
]
