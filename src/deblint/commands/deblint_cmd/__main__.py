#!/usr/bin/python3 -B
import argparse
import os
import sys
import textwrap
import traceback
from typing import List, Optional, NoReturn, Sequence

from argcomplete import autocomplete

from deblint.commands.deblint_cmd.context import ROOT_COMMAND, CommandArg
from deblint.exceptions import DeblintRuntimeError
from deblint.util import (
    _error,
    _warn,
    ColorizedArgumentParser,
    setup_logging,
    program_name,
)
from deblint.version import __version__


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--debug",
        dest="debug_mode",
        action="store_true",
        default=False,
        help="Enable debug logging and raw stack traces on errors.",
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    description = textwrap.dedent(
        """\
    The `deblint` program checks Debian control files (debian/control,
    DEBIAN/control, .dsc, .changes and debian/copyright) for problems.

    Which problems are reported is decided by a preset, which can be adjusted
    by enabling or disabling individual checks.
    """
    )

    parser: argparse.ArgumentParser = ColorizedArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        prog=program_name(),
    )

    parser.add_argument("--version", action="version", version=__version__)

    _add_common_args(parser)
    from deblint.commands.deblint_cmd.lint_cmds import (
        ensure_lint_commands_are_loaded,
    )

    ensure_lint_commands_are_loaded()

    ROOT_COMMAND.configure(parser)

    autocomplete(parser)

    if argv is None:
        argv = sys.argv[1:]
    return parser.parse_args(argv)


def _setup_and_parse_args(
    argv: Optional[Sequence[str]] = None,
) -> argparse.Namespace:
    is_arg_completing = "_ARGCOMPLETE" in os.environ
    if not is_arg_completing:
        setup_logging(reconfigure_logging=True)
    parsed_args = parse_args(argv)
    if is_arg_completing:
        # We could be asserting at this point; but lets just recover gracefully.
        setup_logging(reconfigure_logging=True)
    return parsed_args


def main(argv: Optional[Sequence[str]] = None) -> None:
    parsed_args = _setup_and_parse_args(argv)
    try:
        ROOT_COMMAND(CommandArg(parsed_args))
    except DeblintRuntimeError as e:
        if parsed_args.debug_mode:
            _warn(
                "Re-raising original exception to show the full stack trace due to debug mode being active"
            )
            raise e
        _error(e.message)
    except AssertionError as e:
        _error_w_stack_trace(
            "Internal error in deblint",
            str(e),
            e,
            parsed_args.debug_mode,
            orig_exception=e,
            follow_warning=["Please file a bug against deblint with the full output."],
        )
    except Exception as e:
        _error_w_stack_trace(
            "Unhandled exception (Re-run with --debug to see the raw stack trace)",
            str(e),
            e,
            parsed_args.debug_mode,
            orig_exception=e,
            follow_warning=["Please file a bug against deblint with the full output."],
        )


def _error_w_stack_trace(
    warning: str,
    error_msg: str,
    stacktrace: BaseException,
    debug_mode: bool,
    orig_exception: Optional[BaseException] = None,
    follow_warning: Optional[List[str]] = None,
) -> "NoReturn":
    if debug_mode:
        _warn(
            "Re-raising original exception to show the full stack trace due to debug mode being active"
        )
        raise orig_exception if orig_exception is not None else stacktrace
    _warn(warning)
    _warn("  ----- 8< ---- BEGIN STACK TRACE ---- 8< -----")
    traceback.print_exception(stacktrace)
    _warn("  ----- 8< ---- END STACK TRACE ---- 8< -----")
    if follow_warning:
        for line in follow_warning:
            _warn(line)
    _error(error_msg)


if __name__ == "__main__":
    main()
