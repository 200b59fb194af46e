"""Tests for executors."""

import errno
import io
import os

import pytest

import shellkit
from shellkit.executors import (
    EXEC_FAILED_STATUS,
    CommandFailedError,
    PipeExecutor,
    ResourceAcquisitionError,
    ShellExecutor,
    WaitMismatchError,
    shell_wait,
)
from shellkit.models import ShellConfig
from shellkit.trace import CommandTrace


# ── Shell executor ──────────────────────────────────────────

def test_shell_executor_success(capfd):
    executor = ShellExecutor()
    assert executor.exec("echo", "hello world") is None
    assert capfd.readouterr().out == "hello world\n"


def test_shell_executor_failure():
    executor = ShellExecutor()
    with pytest.raises(CommandFailedError) as exc:
        executor.exec("sh", "-c", "exit 42")
    assert exc.value.returncode == 42
    assert 'sh -c "exit 42"' in str(exc.value)
    assert "42" in str(exc.value)


def test_shell_executor_no_subst_keeps_dollar_literal(capfd):
    ShellExecutor().exec_no_subst("echo", "$HOME")
    assert capfd.readouterr().out == "$HOME\n"


def test_shell_executor_missing_shell():
    executor = ShellExecutor(ShellConfig(shell="/nonexistent/shell"))
    with pytest.raises(ResourceAcquisitionError) as exc:
        executor.run("true")
    assert exc.value.command == "true"


# ── Pipe executor: output ───────────────────────────────────

def test_read_hello_world():
    assert PipeExecutor().read("echo", "hello world") == "hello world\n"


def test_read_compound_command():
    assert PipeExecutor().read("true", "&&", "echo", "ok") == "ok\n"


@pytest.mark.parametrize("value", [
    "it's",
    "a b  c",
    "$HOME",
    "`id`",
    "back\\slash",
    "'''",
    'mixed "double" and \'single\'',
    "line\nbreak",
    "&&",
    "",
])
def test_read_no_subst_round_trip(value):
    assert PipeExecutor().read_no_subst("printf", "%s", value) == value


def test_read_output_larger_than_buffer():
    executor = PipeExecutor(ShellConfig(read_size=7))
    output = executor.read_popen("yes abcdefgh | head -n 20000")
    assert output == "abcdefgh\n" * 20000


def test_read_preserves_order():
    script = 'i=0; while [ $i -lt 3000 ]; do echo $i; i=$((i+1)); done'
    output = PipeExecutor(ShellConfig(read_size=64)).read_popen(script)
    assert output.splitlines() == [str(i) for i in range(3000)]


def test_read_empty_output():
    assert PipeExecutor().read("true") == ""


def test_child_stdin_is_dev_null():
    assert PipeExecutor().read_popen("cat") == ""


def test_read_bytes_and_decoding():
    executor = PipeExecutor()
    assert executor.read_popen_bytes("printf '\\377'") == b"\xff"
    assert executor.read_popen("printf '\\377'") == "\ufffd"


def test_stderr_not_captured(capfd):
    output = PipeExecutor().read_popen("echo out; echo err >&2")
    assert output == "out\n"
    assert "err" in capfd.readouterr().err


# ── Pipe executor: failures ─────────────────────────────────

def test_read_nonzero_exit():
    command = "echo partial; exit 3"
    with pytest.raises(CommandFailedError) as exc:
        PipeExecutor().read_popen(command)
    assert exc.value.returncode == 3
    assert command in str(exc.value)
    assert "3" in str(exc.value)


def test_read_killed_by_signal():
    with pytest.raises(CommandFailedError) as exc:
        PipeExecutor().read_popen("kill -9 $$")
    assert exc.value.returncode == -9
    assert "signal 9" in str(exc.value)


def test_read_exec_failure(capfd):
    executor = PipeExecutor(ShellConfig(shell="/nonexistent/shell"))
    with pytest.raises(CommandFailedError) as exc:
        executor.read_popen("echo hi")
    assert exc.value.returncode == EXEC_FAILED_STATUS
    assert "can't exec:" in capfd.readouterr().err


def test_pipe_failure(monkeypatch):
    def no_pipe():
        raise OSError(errno.EMFILE, "Too many open files")
    monkeypatch.setattr(os, "pipe", no_pipe)
    with pytest.raises(ResourceAcquisitionError, match="can't create pipe: Too many open files"):
        PipeExecutor().read_popen("echo hi")


def test_fork_failure_closes_pipe(monkeypatch):
    real_pipe = os.pipe
    opened = []

    def recording_pipe():
        fds = real_pipe()
        opened.extend(fds)
        return fds

    def no_fork():
        raise OSError(errno.EAGAIN, "Resource temporarily unavailable")

    monkeypatch.setattr(os, "pipe", recording_pipe)
    monkeypatch.setattr(os, "fork", no_fork)
    with pytest.raises(ResourceAcquisitionError, match="can't fork"):
        PipeExecutor().read_popen("echo hi")

    assert len(opened) == 2
    for fd in opened:
        with pytest.raises(OSError):
            os.fstat(fd)


def test_wait_mismatch(monkeypatch):
    real_waitpid = os.waitpid

    def wrong_pid(pid, options):
        real_waitpid(pid, options)
        return pid + 1, 0

    monkeypatch.setattr(os, "waitpid", wrong_pid)
    with pytest.raises(WaitMismatchError) as exc:
        PipeExecutor().read_popen("echo hi")
    assert "can't wait for `echo hi'" in str(exc.value)


@pytest.mark.skipif(not os.path.isdir("/proc/self/fd"), reason="needs /proc")
def test_no_descriptor_leak():
    executor = PipeExecutor()
    before = len(os.listdir("/proc/self/fd"))
    for _ in range(25):
        executor.read("echo", "x")
        with pytest.raises(CommandFailedError):
            executor.read_popen("exit 1")
    after = len(os.listdir("/proc/self/fd"))
    assert after == before


# ── Wait helper ─────────────────────────────────────────────

def test_shell_wait_success():
    pid = os.fork()
    if pid == 0:
        os._exit(0)
    assert shell_wait(pid, "fake") is None


def test_shell_wait_nonzero():
    pid = os.fork()
    if pid == 0:
        os._exit(5)
    with pytest.raises(CommandFailedError) as exc:
        shell_wait(pid, "fake command")
    assert exc.value.returncode == 5
    assert str(exc.value) == "command `fake command' stopped with rc==5"


def test_shell_wait_not_a_child():
    with pytest.raises(WaitMismatchError) as exc:
        shell_wait(os.getpid(), "whatever")
    assert exc.value.pid == os.getpid()


# ── Trace ───────────────────────────────────────────────────

def test_trace_logs_command_and_outcome():
    stream = io.StringIO()
    executor = PipeExecutor(trace=CommandTrace(stream=stream))
    executor.read("echo", "hi")
    with pytest.raises(CommandFailedError):
        executor.read_popen("exit 2")
    log = stream.getvalue()
    assert "read: echo hi" in log
    assert "ok: echo hi" in log
    assert "failed: exit 2 rc=2" in log


def test_shell_executor_trace():
    stream = io.StringIO()
    ShellExecutor(trace=CommandTrace(stream=stream)).exec("true")
    assert "exec: true" in stream.getvalue()


# ── Module-level helpers ────────────────────────────────────

def test_module_level_read():
    assert shellkit.shell_read("echo", "hello world") == "hello world\n"
    assert shellkit.shell_read_no_subst("echo", "$HOME") == "$HOME\n"
    assert shellkit.read_popen("echo a; echo b") == "a\nb\n"


def test_module_level_exec():
    shellkit.shell_exec("true")
    shellkit.shell_exec_no_subst("true")
    with pytest.raises(CommandFailedError):
        shellkit.shell_exec("false")


# ── Argument boundaries under substitution ──────────────────

@pytest.mark.parametrize("value", [
    "a\\",
    'x\\"; echo INJECTED #',
    "back\\slash",
    "\\\\",
])
def test_read_subst_backslash_stays_in_argument(value):
    output = PipeExecutor().read("printf", "%s|", value, "next")
    assert output == f"{value}|next|"


# ── Interrupted drain ───────────────────────────────────────

def test_interrupted_read_reaps_child(monkeypatch):
    real_fork = os.fork
    forked = []

    def recording_fork():
        pid = real_fork()
        forked.append(pid)
        return pid

    def broken_read(fd, size):
        raise RuntimeError("read interrupted")

    monkeypatch.setattr(os, "fork", recording_fork)
    monkeypatch.setattr(os, "read", broken_read)
    with pytest.raises(RuntimeError, match="read interrupted"):
        PipeExecutor().read_popen("yes")

    assert len(forked) == 1
    with pytest.raises(ChildProcessError):
        os.waitpid(forked[0], os.WNOHANG)


def test_child_gets_default_sigpipe():
    with pytest.raises(CommandFailedError) as exc:
        PipeExecutor().read_popen("kill -PIPE $$")
    assert exc.value.returncode == -13
