"""Shell argument escaping — one raw argument in, one shell token out.

Two policies:
  - shell_escape          → double quotes; $VAR, `cmd` and operator tokens
                            still work (composable, not injection-safe)
  - shell_escape_no_subst → single quotes; every argument is literal data
"""

from __future__ import annotations

import string
from collections.abc import Iterable


# Characters that never need quoting in either policy
SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "_./-")

# Shell syntax a caller may splice into a substitution-allowed command line
PASSTHROUGH = frozenset({
    "&&", "||",
    "(", ")",
    "{", "}",
    ">", ">>",
    "<", "<<",
})

EMPTY_TOKEN = "''"

Argument = str | int | float


def _is_number(arg: object) -> bool:
    # bool is an int subclass, but True/False are not command-line numbers
    return isinstance(arg, (int, float)) and not isinstance(arg, bool)


def _is_safe(arg: str) -> bool:
    return all(c in SAFE_CHARS for c in arg)


def _check_type(arg: object) -> None:
    if not isinstance(arg, str):
        raise TypeError(
            f"shell argument must be str, int or float, not {type(arg).__name__}"
        )


def shell_escape(arg: Argument) -> str:
    """Escape one argument, allowing shell substitutions to happen.

    Numbers are trusted and returned as their decimal string. Operator tokens
    from PASSTHROUGH are returned as-is so callers can build compound
    commands, e.g. ("true", "&&", "echo", "ok").
    """
    if _is_number(arg):
        return str(arg)
    _check_type(arg)

    if arg == "":
        return EMPTY_TOKEN

    if arg in PASSTHROUGH:
        return arg

    if _is_safe(arg):
        return arg

    # backslash first, or it would re-escape the quote escapes
    return '"' + arg.replace("\\", "\\\\").replace('"', '\\"') + '"'


def shell_escape_no_subst(arg: Argument) -> str:
    """Escape one argument as pure literal data.

    Single quotes disable every expansion; an embedded single quote closes
    the quoted run, adds an escaped quote and reopens: it's → 'it'\\''s'.
    Operator tokens get no exemption here.
    """
    if _is_number(arg):
        return str(arg)
    _check_type(arg)

    if arg == "":
        return EMPTY_TOKEN

    if _is_safe(arg):
        return arg

    return "'" + arg.replace("'", "'\\''") + "'"


def shell_escape_many(args: Iterable[Argument]) -> list[str]:
    return [shell_escape(arg) for arg in args]


def shell_escape_many_no_subst(args: Iterable[Argument]) -> list[str]:
    return [shell_escape_no_subst(arg) for arg in args]
