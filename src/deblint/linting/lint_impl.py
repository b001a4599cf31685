import sys
from typing import NoReturn

from deblint.commands.deblint_cmd.context import CommandContext
from deblint.commands.deblint_cmd.output import _output_styling
from deblint.configuration import Configuration
from deblint.control_file import ControlFile
from deblint.exceptions import ControlFileStructureError
from deblint.linting.lint_util import LintReport, TermLintReport
from deblint.util import _debug, _error, _warn

EXIT_CODE_VIOLATIONS = 1
EXIT_CODE_STRUCTURAL_ERROR = 2


def initialize_lint_report(context: CommandContext) -> LintReport:
    lint_report_format = context.parsed_args.lint_report_format
    report_output = context.parsed_args.report_output

    if lint_report_format == "term":
        fo = _output_styling(context.parsed_args, sys.stdout)
        if report_output is not None:
            _warn("--report-output is redundant for the `term` report")
        return TermLintReport(fo, display=context.parsed_args.display)
    if lint_report_format == "junit4-xml":
        from deblint.linting.lint_report_junit import JunitLintReport

        if report_output is None:
            report_output = "deblint-lint-junit.xml"

        return JunitLintReport(report_output)

    raise AssertionError(f"Missing case for lint_report_format: {lint_report_format}")


def perform_linting(context: CommandContext) -> None:
    config = context.configuration()
    lint_report = initialize_lint_report(context)
    filename = context.target_file
    _debug(
        f"Checking {filename} as {config.checked_type.type_name} with checks:"
        f" {', '.join(config.enabled_checks())}"
    )
    lint_file(filename, config, lint_report)
    lint_report.finish_report()
    _exit_with_lint_code(lint_report)


def lint_file(
    filename: str,
    config: Configuration,
    lint_report: LintReport,
) -> ControlFile:
    control_file = ControlFile(config, lint_report=lint_report)
    with lint_report.line_state(control_file.lint_state):
        try:
            control_file.parse_file(filename)
            control_file.match_stanzas()
            control_file.lint_stanzas()
        except ControlFileStructureError as e:
            lint_report.report_structural_error(filename, e.message)
        except OSError as e:
            _error(
                f"Could not read {filename}: {e.strerror}",
                exit_code=EXIT_CODE_STRUCTURAL_ERROR,
            )
        except UnicodeDecodeError as e:
            _error(
                f"Could not read {filename}: Not valid UTF-8 (byte offset {e.start})",
                exit_code=EXIT_CODE_STRUCTURAL_ERROR,
            )
    return control_file


def _exit_with_lint_code(lint_report: LintReport) -> NoReturn:
    if lint_report.structural_errors:
        sys.exit(EXIT_CODE_STRUCTURAL_ERROR)
    if lint_report.has_violations:
        sys.exit(EXIT_CODE_VIOLATIONS)
    sys.exit(0)
