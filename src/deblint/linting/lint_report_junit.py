import textwrap
from typing import Iterable, List

from junit_xml import TestCase, TestSuite, to_xml_report_file

from deblint.linting.lint_util import LintReport, LintViolation, format_violation
from deblint.util import _info


class JunitLintReport(LintReport):

    def __init__(self, output_filename: str) -> None:
        super().__init__()
        self._output_filename = output_filename

    def finish_report(self) -> None:
        all_test_cases = list(self._as_test_cases())
        test_suites = [
            TestSuite(
                "deblint",
                test_cases=all_test_cases,
                timestamp=str(self.start_timestamp),
            )
        ]
        with open(self._output_filename, "w", encoding="utf-8") as wfd:
            to_xml_report_file(wfd, test_suites, encoding="utf-8")
        _info(f"Wrote {self._output_filename}")

    def _as_test_cases(self) -> Iterable[TestCase]:
        for filename, duration in self.durations.items():
            violations = self.violations_by_file.get(filename, [])
            yield self._as_test_case(filename, violations, duration)

    def _as_test_case(
        self,
        filename: str,
        violations: List[LintViolation],
        duration: float,
    ) -> TestCase:
        if not duration:
            duration = 0.000001
        case = TestCase(
            filename,
            # The JUnit schema has `classname` as mandatory
            classname=filename,
            allow_multiple_subelements=True,
            elapsed_sec=duration,
        )
        structural_error = self.structural_errors.get(filename)
        if structural_error is not None:
            case.add_error_info(
                message=structural_error,
                output=f"{filename}: {structural_error}\n",
            )
        for violation in violations:
            if violation.line_number is None:
                location = "entire file"
            else:
                location = f"line {violation.line_number}"
            msg = format_violation(violation)
            output = textwrap.dedent(
                f"""\
            {filename} ({location}): {msg}
            """
            )
            case.add_failure_info(
                message=format_violation(violation, display="check"),
                output=output,
            )
        return case
