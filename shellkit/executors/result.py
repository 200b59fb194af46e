"""Shared error types and helpers for all executors."""

from __future__ import annotations

from shellkit.trace import CommandTrace


class ShellError(Exception):
    """Base for every failure of a shell command; names the command line."""

    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.command = command


class ResourceAcquisitionError(ShellError):
    """Pipe, fork or shell could not be obtained from the OS."""


class WaitMismatchError(ShellError):
    def __init__(self, command: str, pid: int):
        super().__init__(f"can't wait for `{command}' [{pid}]", command)
        self.pid = pid


class CommandFailedError(ShellError):
    """Command ran but reported failure.

    returncode follows the subprocess convention: negative means the child
    was killed by that signal number.
    """

    def __init__(self, command: str, returncode: int):
        super().__init__(describe_failure(command, returncode), command)
        self.returncode = returncode


def describe_failure(command: str, returncode: int) -> str:
    if returncode < 0:
        return f"command `{command}' killed by signal {-returncode}"
    return f"command `{command}' stopped with rc=={returncode}"


def check_returncode(command: str, returncode: int,
                     trace: CommandTrace | None = None) -> None:
    """Raise CommandFailedError unless returncode is 0."""
    if returncode == 0:
        if trace:
            trace.log(f"ok: {command}")
        return
    if trace:
        if returncode < 0:
            trace.log(f"failed: {command} (signal {-returncode})")
        else:
            trace.log(f"failed: {command} rc={returncode}")
    raise CommandFailedError(command, returncode)
