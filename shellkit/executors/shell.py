"""Shell command executor — fire-and-forget, stdio inherited."""

from __future__ import annotations

import subprocess

from shellkit.command import format_command, format_command_no_subst
from shellkit.escape import Argument
from shellkit.executors.result import ResourceAcquisitionError, check_returncode
from shellkit.models import ShellConfig
from shellkit.trace import CommandTrace


class ShellExecutor:
    """Runs command lines via the configured shell, blocking until done."""

    def __init__(self, config: ShellConfig | None = None,
                 trace: CommandTrace | None = None):
        self.config = config or ShellConfig()
        self.trace = trace

    def run(self, command: str) -> None:
        if self.trace:
            self.trace.log(f"exec: {command}")
        try:
            proc = subprocess.run(command, shell=True, executable=self.config.shell)
        except OSError as e:
            raise ResourceAcquisitionError(
                f"can't run `{command}': {e.strerror or e}", command,
            ) from e
        check_returncode(command, proc.returncode, self.trace)

    def exec(self, *args: Argument) -> None:
        self.run(format_command(*args))

    def exec_no_subst(self, *args: Argument) -> None:
        self.run(format_command_no_subst(*args))
