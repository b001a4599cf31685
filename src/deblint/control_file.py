import sys
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence

from deblint.configuration import Configuration
from deblint.control_specs import FILE_CHECK_BY_TYPE, STANZA_SPECS
from deblint.exceptions import (
    ControlFileStructureError,
    PGPEnvelopeError,
    StageAlreadyRunError,
)
from deblint.linting.lint_util import LintReport, LintState, LintViolation
from deblint.parsing import (
    SYNTAX_OF_CONTROL_FILES,
    DataField,
    Line,
    Stanza,
    is_blank_line,
    to_lines,
)
from deblint.stanza_spec import StanzaSpec, placeholder_stanza_spec
from deblint.util import _debug

PGP_SIGNED_MESSAGE_MARKER = "-----BEGIN PGP SIGNED MESSAGE-----"
PGP_SIGNATURE_MARKER = "-----BEGIN PGP SIGNATURE-----"


class ControlFile:
    """A control file, linted in three stages

    1. `parse` splits the text into stanzas of fields;
    2. `match_stanzas` assigns a stanza spec to every stanza;
    3. `lint_stanzas` runs the field, stanza and file checks.

    Each stage may run only once and only after the previous stage. Problems
    found along the way are collected in `violations`, while problems that
    make the file impossible to check raise a `ControlFileStructureError`.
    """

    def __init__(
        self,
        config: Configuration,
        *,
        lint_report: Optional[LintReport] = None,
    ) -> None:
        self._config = config
        self._lint_state = LintState(config, lint_report=lint_report)
        self._stanzas: List[Stanza] = []
        self._specs: List[StanzaSpec] = []
        self._parsed = False
        self._matched = False
        self._linted = False

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def lint_state(self) -> LintState:
        return self._lint_state

    @property
    def stanzas(self) -> Sequence[Stanza]:
        return tuple(self._stanzas)

    @property
    def specs(self) -> Sequence[StanzaSpec]:
        return tuple(self._specs)

    @property
    def violations(self) -> List[LintViolation]:
        return self._lint_state.violations

    def parse_file(self, path: str) -> None:
        """Parse the file at `path`; `-` denotes stdin"""
        if path == "-":
            self.parse(sys.stdin.read().splitlines())
            return
        with open(path, encoding="utf-8") as fd:
            self.parse(fd.read().splitlines())

    def parse(self, text: Iterable[str]) -> None:
        if self._parsed:
            raise StageAlreadyRunError("The control file has already been parsed")
        self._parsed = True
        lines = to_lines(text)
        self._lint_state.lines = [line.text for line in lines]
        if not lines:
            raise ControlFileStructureError("Control file is empty")
        lint_state = self._lint_state
        if (
            self._config.checked_type.supports_pgp
            and lines[0].text == PGP_SIGNED_MESSAGE_MARKER
        ):
            self._strip_pgp_envelope(lines)
            if not lines:
                raise ControlFileStructureError(
                    "Control file only contains a PGP signature"
                )
        lines = self._strip_comments(lines)
        if self._config.trailing_space:
            for line in lines:
                if line.text != line.text.rstrip():
                    lint_state.report(
                        f"Line has trailing whitespace: {line.text.strip()}",
                        "trailingSpace",
                        SYNTAX_OF_CONTROL_FILES,
                        line=line.line_number,
                    )

        while True:
            while lines and is_blank_line(lines[0]):
                blank = lines.popleft()
                if self._config.empty_stanza_separators and blank.text:
                    lint_state.report(
                        "Stanza separator contains whitespaces: should be empty",
                        "emptyStanzaSeparators",
                        SYNTAX_OF_CONTROL_FILES,
                        line=blank.line_number,
                    )
            stanza = Stanza.parse_next(lines, lint_state)
            if stanza is None:
                break
            self._stanzas.append(stanza)
            if lines and not is_blank_line(lines[0]):
                # A line that could not be parsed as a field
                break
        _debug(f"Parsed {len(self._stanzas)} stanza(s) from {lint_state.path}")

    def _strip_pgp_envelope(self, lines: Deque[Line]) -> None:
        lines.popleft()
        hash_field = DataField.parse_next(lines, self._lint_state)
        if hash_field is None or hash_field.name.lower() != "hash":
            raise PGPEnvelopeError("Unrecognized PGP signature format")
        while lines and is_blank_line(lines[0]):
            lines.popleft()
        for idx, line in enumerate(lines):
            if line.text == PGP_SIGNATURE_MARKER:
                break
        else:
            raise PGPEnvelopeError("PGP signature is not present")
        while len(lines) > idx:
            lines.pop()

    def _strip_comments(self, lines: Deque[Line]) -> Deque[Line]:
        config = self._config
        report_comments = (
            config.comments and not config.checked_type.allows_comments
        )
        kept: Deque[Line] = deque()
        for line in lines:
            if not line.text.startswith("#"):
                kept.append(line)
                continue
            if report_comments:
                self._lint_state.report(
                    "Comments are only allowed in debian/control files",
                    "comments",
                    SYNTAX_OF_CONTROL_FILES,
                    line=line.line_number,
                )
        return kept

    def match_stanzas(self) -> None:
        """Assign a stanza spec to every parsed stanza

        Specs are consumed in order. A mandatory spec must match before any
        later spec is considered, except when the previous stanza already
        used it, in which case the later specs are tried as well. When
        several optional specs can match, the last of them is chosen.
        """
        if self._matched:
            raise StageAlreadyRunError("The stanzas have already been matched")
        assert self._parsed, "The control file must be parsed before matching stanzas"
        self._matched = True
        lint_state = self._lint_state
        all_specs = STANZA_SPECS[self._config.checked_type]
        candidates = list(all_specs)
        used: List[StanzaSpec] = []

        for ordinal, stanza in enumerate(self._stanzas, start=1):
            matching: List[int] = []
            for idx, spec in enumerate(candidates):
                can_match = spec.can_match(stanza)
                if spec.mandatory:
                    if can_match:
                        matching.append(idx)
                        break
                    if not used or used[-1] is not spec:
                        break
                elif can_match:
                    matching.append(idx)

            if not matching:
                message = (
                    "Cannot match stanza; possibly missing fields or incorrect"
                    f" stanza order: no. {ordinal}"
                )
                if not candidates:
                    message += (
                        " (no stanzas were left to match; maybe the error is in an"
                        " earlier stanza)"
                    )
                else:
                    names = ", ".join(s.name for s in candidates)
                    message += f" (attempted matching with: {names})"
                lint_state.report(message, line=stanza.first_line)
                self._specs.append(placeholder_stanza_spec())
                continue

            chosen_idx = matching[-1]
            spec = candidates[chosen_idx]
            _debug(f"Stanza at line {stanza.first_line} matched {spec.name}")
            spec.match(stanza, lint_state)
            self._specs.append(spec)
            used.append(spec)
            del candidates[:chosen_idx]
            if not spec.repeatable:
                del candidates[0]

        for spec in all_specs:
            if spec.mandatory and not any(u is spec for u in used):
                lint_state.report(f"Missing mandatory stanza: {spec.name}")

    def lint_stanzas(self) -> None:
        if self._linted:
            raise StageAlreadyRunError("The stanzas have already been linted")
        assert self._matched, "The stanzas must be matched before linting them"
        self._linted = True
        lint_state = self._lint_state
        config = self._config
        for stanza, spec in zip(self._stanzas, self._specs):
            for name, field_spec in spec.fields.items():
                field = stanza.get_field(name)
                if field is None:
                    continue
                if config.field_name_capitalization and name != field.name:
                    lint_state.report(
                        f"Field name is not properly capitalized: {field.name}",
                        "fieldNameCapitalization",
                        SYNTAX_OF_CONTROL_FILES,
                        line=field.line_number,
                    )
                with lint_state.at_line(field.line_number):
                    field_spec.check(field.data, lint_state)
            with lint_state.at_line(stanza.first_line):
                spec.check(stanza, lint_state)
        FILE_CHECK_BY_TYPE[config.checked_type](self, lint_state)

    def lint(self, text: Iterable[str]) -> List[LintViolation]:
        """Run all three stages on the text"""
        self.parse(text)
        self.match_stanzas()
        self.lint_stanzas()
        return self.violations
