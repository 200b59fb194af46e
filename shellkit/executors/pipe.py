"""Pipe capture executor — io.popen replacement that catches child failures.

Unlike popen, the result is one blob with all of the child's stdout, the
child's stdin is /dev/null, and a failing command raises instead of being
reported through a status the caller may forget to check.

Protocol: pipe → fork → parent drains the read end until EOF, then reaps
the child; the child rewires stdin/stdout and execs `shell -c LINE`.
"""

from __future__ import annotations

import os
import signal

from shellkit.command import format_command, format_command_no_subst
from shellkit.escape import Argument
from shellkit.executors.result import (
    ResourceAcquisitionError,
    WaitMismatchError,
    check_returncode,
)
from shellkit.models import ShellConfig
from shellkit.trace import CommandTrace


# Standard descriptors
STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

# Exit status of a child whose exec failed (same as sh for "not found")
EXEC_FAILED_STATUS = 127


def shell_wait(pid: int, command: str, trace: CommandTrace | None = None) -> None:
    """Reap pid and make sure it exited with status 0.

    Raises WaitMismatchError if pid can't be waited for, CommandFailedError
    on a non-zero exit or a signal-terminated child.
    """
    try:
        wpid, status = os.waitpid(pid, 0)
    except ChildProcessError as e:
        raise WaitMismatchError(command, pid) from e
    if wpid != pid:
        raise WaitMismatchError(command, pid)
    check_returncode(command, os.waitstatus_to_exitcode(status), trace)


def _exec_child(command: str, shell: str, rfd: int, wfd: int) -> None:
    """Child side of the fork. Never returns.

    No exception may leave this function: the caller's frames above it belong
    to the parent's logic, so the only failure channel is a message on fd 2
    plus the exit status the parent sees in shell_wait.
    """
    try:
        # Python ignores SIGPIPE; the exec'd shell must not inherit that
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)

        # force stdin = /dev/null
        dev_null = os.open(os.devnull, os.O_RDONLY)
        os.dup2(dev_null, STDIN_FILENO)
        os.close(dev_null)

        # close "remote" side of pipe, and attach pipe to stdout
        os.close(rfd)
        os.dup2(wfd, STDOUT_FILENO)
        os.close(wfd)

        os.execv(shell, [shell, "-c", command])
    except BaseException as e:
        try:
            os.write(STDERR_FILENO, f"can't exec: {e}\n".encode(errors="replace"))
        except OSError:
            pass
    finally:
        os._exit(EXEC_FAILED_STATUS)


class PipeExecutor:
    """Runs a command line in a forked child and captures its stdout.

    Each call owns exactly one pipe and one child; both are released before
    the call returns. Calls block until the child exits, with no timeout.
    """

    def __init__(self, config: ShellConfig | None = None,
                 trace: CommandTrace | None = None):
        self.config = config or ShellConfig()
        self.trace = trace

    def read_popen_bytes(self, command: str) -> bytes:
        if self.trace:
            self.trace.log(f"read: {command}")

        try:
            rfd, wfd = os.pipe()
        except OSError as e:
            raise ResourceAcquisitionError(
                f"can't create pipe: {e.strerror or e}", command,
            ) from e

        try:
            pid = os.fork()
        except OSError as e:
            os.close(rfd)
            os.close(wfd)
            raise ResourceAcquisitionError(
                f"can't fork: {e.strerror or e}", command,
            ) from e

        if pid == 0:
            _exec_child(command, self.config.shell, rfd, wfd)

        # in parent: the write end belongs to the child now
        os.close(wfd)
        return self._drain(pid, rfd, command)

    def _drain(self, pid: int, rfd: int, command: str) -> bytes:
        chunks: list[bytes] = []
        try:
            while True:
                buf = os.read(rfd, self.config.read_size)
                if not buf:
                    break
                chunks.append(buf)
        except BaseException:
            os.close(rfd)
            # reap without checking status; a writer dies of SIGPIPE now
            try:
                os.waitpid(pid, 0)
            except ChildProcessError:
                pass
            raise
        os.close(rfd)

        # EOF seen: the child can't produce more output, safe to reap
        shell_wait(pid, command, self.trace)
        return b"".join(chunks)

    def read_popen(self, command: str) -> str:
        return self.read_popen_bytes(command).decode(self.config.encoding, errors="replace")

    def read(self, *args: Argument) -> str:
        return self.read_popen(format_command(*args))

    def read_no_subst(self, *args: Argument) -> str:
        return self.read_popen(format_command_no_subst(*args))
