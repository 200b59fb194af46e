"""Command-line formatting — escaped tokens joined by single spaces."""

from __future__ import annotations

from shellkit.escape import Argument, shell_escape_many, shell_escape_many_no_subst


def _join(tokens: list[str]) -> str:
    if not tokens:
        raise ValueError("cannot format an empty command")
    return " ".join(tokens)


def format_command(*args: Argument) -> str:
    """Build a command line that still allows shell substitutions.

        >>> format_command("echo", "hello world")
        'echo "hello world"'
        >>> format_command("true", "&&", "echo", "ok")
        'true && echo ok'
    """
    return _join(shell_escape_many(args))


def format_command_no_subst(*args: Argument) -> str:
    """Build a command line where every argument is literal."""
    return _join(shell_escape_many_no_subst(args))
