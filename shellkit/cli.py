"""CLI entry point — shellkit quote / run / read / seed."""

from __future__ import annotations

import argparse
import os
import sys

from shellkit import __version__
from shellkit.command import format_command, format_command_no_subst
from shellkit.config import ConfigError, load_config, load_default_config
from shellkit.executors import CommandFailedError, PipeExecutor, ShellError, ShellExecutor
from shellkit.models import ShellConfig
from shellkit.seed import random_seed_from_string
from shellkit.trace import CommandTrace


def _load(args) -> ShellConfig:
    if args.config:
        return load_config(args.config)
    return load_default_config()


def _make_trace(args, config: ShellConfig) -> CommandTrace | None:
    if args.trace or os.environ.get("SHELLKIT_TRACE"):
        return CommandTrace(path=config.trace.file)
    return CommandTrace.from_config(config.trace)


def _command_args(args) -> list[str]:
    words = list(args.words)
    if words and words[0] == "--":
        words = words[1:]
    return words


def cmd_quote(args) -> None:
    words = _command_args(args)
    formatter = format_command_no_subst if args.no_subst else format_command
    print(formatter(*words))


def cmd_run(args) -> None:
    config = _load(args)
    words = _command_args(args)
    trace = _make_trace(args, config)
    executor = ShellExecutor(config, trace=trace)
    try:
        if args.no_subst:
            executor.exec_no_subst(*words)
        else:
            executor.exec(*words)
    finally:
        if trace:
            trace.close()


def cmd_read(args) -> None:
    config = _load(args)
    words = _command_args(args)
    trace = _make_trace(args, config)
    executor = PipeExecutor(config, trace=trace)
    try:
        if args.no_subst:
            output = executor.read_no_subst(*words)
        else:
            output = executor.read(*words)
    finally:
        if trace:
            trace.close()
    sys.stdout.write(output)
    sys.stdout.flush()


def cmd_seed(args) -> None:
    print(random_seed_from_string(args.base))


def _add_command_parser(sub, name: str, help_text: str) -> argparse.ArgumentParser:
    parser = sub.add_parser(name, help=help_text)
    parser.add_argument("--no-subst", action="store_true",
                        help="Quote every argument as literal data")
    parser.add_argument("words", nargs=argparse.REMAINDER,
                        help="Command and its arguments")
    return parser


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="shellkit",
        description="Build shell command lines safely and run them",
    )
    parser.add_argument("--version", "-V", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None,
                        help="Config file (default: $SHELLKIT_CONFIG or .shellkit.yaml)")
    parser.add_argument("--trace", action="store_true", help="Log commands to stderr")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command")

    _add_command_parser(sub, "quote", "Print the escaped command line")
    _add_command_parser(sub, "run", "Run a command, output goes straight to the terminal")
    _add_command_parser(sub, "read", "Run a command and print its captured output")

    seed_parser = sub.add_parser("seed", help="Print a deterministic seed for a string")
    seed_parser.add_argument("base", nargs="?", default=None,
                             help="Seed string (default: current unix time)")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command in ("quote", "run", "read") and not _command_args(args):
        parser.error(f"'{args.command}' needs a command to work with")

    if args.no_color:
        os.environ["SHELLKIT_NO_COLOR"] = "1"

    try:
        if args.command == "quote":
            cmd_quote(args)
        elif args.command == "run":
            cmd_run(args)
        elif args.command == "read":
            cmd_read(args)
        elif args.command == "seed":
            cmd_seed(args)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        sys.exit(1)
    except CommandFailedError as e:
        print(f"Shell error: {e}", file=sys.stderr)
        sys.exit(e.returncode if e.returncode > 0 else 1)
    except ShellError as e:
        print(f"Shell error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
