import argparse
import sys
from typing import Callable, List

from deblint.commands.deblint_cmd.context import ROOT_COMMAND, CommandContext, add_arg
from deblint.commands.deblint_cmd.output import _output_styling
from deblint.configuration import (
    ALL_CHECKS,
    PRESET_PRECEDENCE,
    find_check,
    find_preset,
    previous_preset,
)
from deblint.control_types import ControlType, TYPE_NAME2CONTROL_TYPE

_LIST_TOPICS = ("presets", "checks", "types")


def _check_names_completer(prefix: str, **_kwargs: object) -> List[str]:
    # The value is a comma-separated list; only complete its last element
    done, _, partial = prefix.rpartition(",")
    lead = f"{done}," if done else ""
    return [
        lead + c.name for c in ALL_CHECKS if c.name.lower().startswith(partial.lower())
    ]


def _check_list_arg(
    flag: str,
    help_text: str,
) -> Callable[[argparse.ArgumentParser], None]:
    def _configurator(argparser: argparse.ArgumentParser) -> None:
        action = argparser.add_argument(
            flag,
            dest=flag.lstrip("-"),
            action="append",
            default=[],
            metavar="CHECK[,CHECK...]",
            help=help_text,
        )
        # Read by argcomplete
        action.completer = _check_names_completer  # type: ignore[attr-defined]

    return _configurator


@ROOT_COMMAND.register_subcommand(
    "lint",
    help_description="Check a control file for problems",
    log_only_to_stderr=True,
    argparser=[
        add_arg(
            "target_file",
            metavar="FILE",
            nargs="?",
            default=None,
            help="The file to check. Defaults to the default file of the type."
            ' Use "-" to read from stdin',
        ),
        add_arg(
            "-p",
            "--preset",
            dest="preset",
            action="store",
            default=None,
            choices=[p.name for p in PRESET_PRECEDENCE],
            type=str.lower,
            help="The preset providing the initial set of checks (default: normal)",
        ),
        add_arg(
            "-t",
            "--type",
            dest="control_type",
            action="store",
            default=ControlType.COPYRIGHT.type_name,
            choices=list(TYPE_NAME2CONTROL_TYPE),
            help="The type of the control file (default: debian/copyright)",
        ),
        _check_list_arg(
            "--enable",
            "Enable checks on top of the preset. Can be used multiple times",
        ),
        _check_list_arg(
            "--disable",
            "Disable checks of the preset. Takes precedence over --enable."
            " Can be used multiple times",
        ),
        add_arg(
            "--display",
            dest="display",
            action="store",
            default="neither",
            choices=["check", "reference", "both", "neither"],
            type=str.lower,
            help="Whether to show the check name, the reference to the relevant"
            " standard, both or neither with each problem (default: neither)",
        ),
        add_arg(
            "--lint-report-format",
            dest="lint_report_format",
            action="store",
            default="term",
            choices=["term", "junit4-xml"],
            help="The report output format",
        ),
        add_arg(
            "--report-output",
            dest="report_output",
            action="store",
            default=None,
            help="Where to place the report (for report formats that generate files)",
        ),
    ],
)
def lint_cmd(context: CommandContext) -> None:
    """Check a control file and exit with a non-zero code on problems

    The exit code is 1 when problems were found and 2 when the file could not
    be checked at all.
    """
    from deblint.linting.lint_impl import perform_linting

    perform_linting(context)


@ROOT_COMMAND.register_subcommand(
    "list",
    help_description="List the known presets, checks or control file types",
    argparser=[
        add_arg(
            "topic",
            choices=_LIST_TOPICS,
            help="What to list",
        ),
        add_arg(
            "--output-format",
            dest="output_format",
            default="text",
            choices=["text", "csv"],
            help="Select a given output format (options and output are not stable"
            " between releases)",
        ),
    ],
)
def list_cmd(context: CommandContext) -> None:
    fo = _output_styling(context.parsed_args, sys.stdout)
    assert fo.output_format in {"text", "csv"}
    topic = context.parsed_args.topic
    if topic == "presets":
        rows = [(p.name, p.description) for p in PRESET_PRECEDENCE]
        fo.print_list_table(["Preset", "Description"], rows)
    elif topic == "checks":
        rows = [(c.name, c.description) for c in ALL_CHECKS]
        fo.print_list_table(["Check", "Description"], rows)
    elif topic == "types":
        rows = [(ct.type_name, ct.default_file, ct.description) for ct in ControlType]
        fo.print_list_table(["Type", "Default file", "Description"], rows)
    else:
        raise AssertionError(f"Missing case for topic: {topic}")


@ROOT_COMMAND.register_subcommand(
    "preset-info",
    help_description="Describe a preset and list the checks it enables",
    argparser=add_arg(
        "preset_name",
        metavar="PRESET",
        help="The name of the preset (case-insensitive)",
    ),
)
def preset_info_cmd(context: CommandContext) -> None:
    fo = _output_styling(context.parsed_args, sys.stdout)
    preset = find_preset(context.parsed_args.preset_name)
    lesser = previous_preset(preset)
    fo.print(preset.description)
    fo.print()
    fo.print("Checks enabled by the preset (checks marked [!] are new in this preset):")
    for check in ALL_CHECKS:
        if not check.accessor(preset.configuration):
            continue
        if lesser is None or not check.accessor(lesser.configuration):
            fo.print(f" * {check.name} [!]")
        else:
            fo.print(f" * {check.name}")


@ROOT_COMMAND.register_subcommand(
    "type-info",
    help_description="Describe a control file type",
    argparser=add_arg(
        "type_name",
        metavar="TYPE",
        help="The name of the type, such as debian/control (case-sensitive)",
    ),
)
def type_info_cmd(context: CommandContext) -> None:
    fo = _output_styling(context.parsed_args, sys.stdout)
    control_type = ControlType.from_type_name(context.parsed_args.type_name)
    fo.print(control_type.type_name)
    fo.print(control_type.description)
    fo.print(f"Default file: {control_type.default_file}")
    if control_type.supports_pgp:
        fo.print("The file may be wrapped in a PGP signature")


@ROOT_COMMAND.register_subcommand(
    "check-info",
    help_description="Describe a check and list the presets enabling it",
    argparser=add_arg(
        "check_name",
        metavar="CHECK",
        help="The name of the check (case-insensitive)",
    ),
)
def check_info_cmd(context: CommandContext) -> None:
    fo = _output_styling(context.parsed_args, sys.stdout)
    check = find_check(context.parsed_args.check_name)
    fo.print(f"{check.name}: {check.description}")
    presets = [p.name for p in PRESET_PRECEDENCE if check.accessor(p.configuration)]
    if presets:
        fo.print(f"Enabled by default in: {', '.join(presets)}")
    else:
        fo.print("Not enabled by any preset")


def ensure_lint_commands_are_loaded() -> None:
    # Loading the module does the heavy lifting
    # However, having this function means that we do not have an "unused" import that some tool
    # gets tempted to remove
    assert ROOT_COMMAND.has_command("lint")
