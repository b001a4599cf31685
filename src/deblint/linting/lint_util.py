import collections
import contextlib
import dataclasses
import datetime
import time
import typing
from collections import defaultdict, Counter
from typing import (
    List,
    Optional,
    Mapping,
    Sequence,
    Iterator,
    Literal,
)

from deblint.commands.deblint_cmd.output import OutputStylingBase
from deblint.configuration import CHECKS_BY_NAME, Configuration
from deblint.control_types import ControlType

DisplayMode = Literal["check", "reference", "both", "neither"]
STRUCTURAL_ERROR = "<structural>"


@dataclasses.dataclass(slots=True, frozen=True)
class LintViolation:
    message: str
    check: Optional[str] = None
    reference: Optional[str] = None
    line_number: Optional[int] = None


class LintState:
    """Reporting sink and context for checking a single control file

    Every reported problem becomes a `LintViolation` accumulated in
    `violations`; when a `LintReport` is attached, it is forwarded to that
    report as well.
    """

    def __init__(
        self,
        config: Configuration,
        *,
        lint_report: Optional["LintReport"] = None,
    ) -> None:
        self.config = config
        self.violations: List[LintViolation] = []
        self.lines: Sequence[str] = tuple()
        self._lint_report = lint_report
        self._current_line: Optional[int] = None

    @property
    def path(self) -> str:
        return self.config.effective_target_file

    @property
    def checked_type(self) -> ControlType:
        return self.config.checked_type

    @contextlib.contextmanager
    def at_line(self, line_number: Optional[int]) -> Iterator[None]:
        previous = self._current_line
        self._current_line = line_number
        try:
            yield
        finally:
            self._current_line = previous

    def report(
        self,
        message: str,
        check: Optional[str] = None,
        reference: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        if check is not None and check not in CHECKS_BY_NAME:
            raise ValueError(f'Reported violation uses an unknown check "{check}"')
        if line is None:
            line = self._current_line
        violation = LintViolation(message, check, reference, line)
        self.violations.append(violation)
        if self._lint_report is not None:
            self._lint_report.report_violation(self, violation)


class LintReport:

    def __init__(self) -> None:
        self.violations_count: typing.Counter[str] = Counter()
        self.violations_by_file: Mapping[str, List[LintViolation]] = defaultdict(
            list
        )
        self.structural_errors: typing.Dict[str, str] = {}
        self.lint_state: Optional[LintState] = None
        self.start_timestamp = datetime.datetime.now()
        self.durations: typing.Dict[str, float] = collections.defaultdict(lambda: 0.0)
        self._timer = time.perf_counter()

    @property
    def has_violations(self) -> bool:
        return bool(self.violations_count)

    @contextlib.contextmanager
    def line_state(self, lint_state: LintState) -> Iterator[None]:
        previous = self.lint_state
        if previous is not None:
            path = previous.path
            duration = time.perf_counter() - self._timer
            self.durations[path] += duration

        self.lint_state = lint_state

        try:
            self._timer = time.perf_counter()
            yield
        finally:
            now = time.perf_counter()
            duration = now - self._timer
            self.durations[lint_state.path] += duration
            self._timer = now
            self.lint_state = previous

    def report_violation(
        self,
        lint_state: LintState,
        violation: LintViolation,
    ) -> None:
        filename = lint_state.path
        self.violations_by_file[filename].append(violation)
        self.violations_count[violation.check or STRUCTURAL_ERROR] += 1
        self.process_violation(filename, lint_state, violation)

    def report_structural_error(self, filename: str, message: str) -> None:
        self.structural_errors[filename] = message
        # Force it to exist in self.durations, since subclasses iterate over it
        if filename not in self.durations:
            self.durations[filename] = 0.0
        self.process_structural_error(filename, message)

    def process_violation(
        self,
        filename: str,
        lint_state: LintState,
        violation: LintViolation,
    ) -> None:
        # Subclass hook
        pass

    def process_structural_error(self, filename: str, message: str) -> None:
        # Subclass hook
        pass

    def finish_report(self) -> None:
        # Subclass hook
        pass


def _error_tag(fo: OutputStylingBase, text: str = "Error") -> str:
    return fo.colored(
        text,
        fg="red",
        bg="black",
        style="bold",
    )


def format_violation(
    violation: LintViolation,
    *,
    display: DisplayMode = "both",
) -> str:
    """Render the message with the check name and reference as requested

    >>> v = LintViolation("Empty data field: Source", "emptyFields", None, 3)
    >>> format_violation(v)
    '[emptyFields] Empty data field: Source'
    >>> format_violation(v, display="neither")
    'Empty data field: Source'
    """
    msg = violation.message
    if violation.check is not None and display in ("check", "both"):
        msg = f"[{violation.check}] {msg}"
    if violation.reference is not None and display in ("reference", "both"):
        msg = f"{msg} <{violation.reference}>"
    return msg


class TermLintReport(LintReport):

    def __init__(
        self,
        fo: OutputStylingBase,
        *,
        display: DisplayMode = "both",
    ) -> None:
        super().__init__()
        self.fo = fo
        self.display = display

    def process_violation(
        self,
        filename: str,
        lint_state: LintState,
        violation: LintViolation,
    ) -> None:
        fo = self.fo
        tag = _error_tag(fo)
        msg = format_violation(violation, display=self.display)
        line_number = violation.line_number
        if line_number is None:
            fo.print(f"{tag}: File: {filename}: {msg}")
            return
        fo.print(f"{tag}: File: {filename}:{line_number}: {msg}")
        lines = lint_state.lines
        if 0 < line_number <= len(lines):
            line_no_width = len(str(len(lines)))
            fo.print(f"    {line_number:{line_no_width}}: {lines[line_number - 1]}")

    def process_structural_error(self, filename: str, message: str) -> None:
        tag = _error_tag(self.fo, "Fatal")
        self.fo.print(f"{tag}: File: {filename}: {message}")

    def finish_report(self) -> None:
        fo = self.fo
        violations = sum(self.violations_count.values())
        if violations:
            fo.print(f"Found {violations} problem(s)")
