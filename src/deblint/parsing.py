import dataclasses
import re
from collections import deque
from enum import Enum
from typing import Deque, Dict, Iterable, Iterator, List, Optional, TYPE_CHECKING

from deblint import DEBIAN_POLICY_CONTROL_FIELDS

if TYPE_CHECKING:
    from deblint.linting.lint_util import LintState


SYNTAX_OF_CONTROL_FILES = f"{DEBIAN_POLICY_CONTROL_FIELDS}#syntax-of-control-files"

_RE_FIELD_NAME = re.compile(r'[!-"$-,.-9;-~][!-9;-~]*')
_RE_BLANK_LINE = re.compile(r"^[ \t]*$")
_RE_LEADING_INDENT = re.compile(r"^[ \t]*")
_RE_FOLD_NEWLINE = re.compile(r"\s*\n\s*")


@dataclasses.dataclass(slots=True, frozen=True)
class Line:
    text: str
    line_number: int


class FieldType(Enum):
    SIMPLE = "simple"
    FOLDED = "folded"
    MULTILINE = "multiline"


def is_blank_line(line: Line) -> bool:
    return _RE_BLANK_LINE.match(line.text) is not None


def to_lines(text: Iterable[str]) -> Deque[Line]:
    return deque(
        Line(t.rstrip("\r\n"), line_number)
        for line_number, t in enumerate(text, start=1)
    )


@dataclasses.dataclass(slots=True, frozen=True)
class DataField:
    """A single `Name: value` declaration, including its continuation lines

    The `data` never has trailing whitespace and its first line is never
    indented. Continuation lines keep their indentation and are separated
    by newlines.
    """

    name: str
    data: str
    field_type: FieldType
    line_number: int = 0

    @classmethod
    def create(
        cls,
        name: str,
        raw_data: str,
        field_type: FieldType,
        line_number: int = 0,
    ) -> "DataField":
        data = _RE_LEADING_INDENT.sub("", raw_data.rstrip(), count=1)
        return cls(name, data, field_type, line_number)

    @classmethod
    def parse_next(
        cls,
        lines: Deque[Line],
        lint_state: "LintState",
    ) -> Optional["DataField"]:
        """Consume the next field from the line buffer

        On success, the field's lines are removed from `lines`. A line without
        a colon is reported and left in place; the caller must treat this as
        the end of the parseable content.
        """
        if not lines:
            lint_state.report("Missing expected data field: no lines left")
            return None
        first = lines[0]
        field_name, colon, value = first.text.partition(":")
        if not colon:
            lint_state.report(
                f"Data field declaration is missing colon: {first.text}",
                line=first.line_number,
            )
            return None
        config = lint_state.config
        if config.field_name and not _RE_FIELD_NAME.fullmatch(field_name):
            lint_state.report(
                f"Invalid field name: {field_name}",
                "fieldName",
                SYNTAX_OF_CONTROL_FILES,
                line=first.line_number,
            )
        if config.space_after_colon and value and not value.startswith(" "):
            lint_state.report(
                f"Missing space after colon: {field_name}",
                "spaceAfterColon",
                SYNTAX_OF_CONTROL_FILES,
                line=first.line_number,
            )
        lines.popleft()
        parts = [value]
        while (
            lines
            and lines[0].text.startswith((" ", "\t"))
            and not is_blank_line(lines[0])
        ):
            parts.append(lines.popleft().text)
        field_type = FieldType.MULTILINE if len(parts) > 1 else FieldType.SIMPLE
        return cls.create(field_name, "\n".join(parts), field_type, first.line_number)

    def change_type(
        self,
        field_type: FieldType,
        *,
        force: bool = False,
    ) -> Optional["DataField"]:
        """Convert the field to another type

        Returns None when the conversion narrows the field and `force` is not
        set. A forced conversion to SIMPLE keeps only the first line.
        """
        if field_type == self.field_type:
            return self
        if self.field_type == FieldType.MULTILINE and field_type == FieldType.FOLDED:
            return DataField.create(
                self.name,
                _RE_FOLD_NEWLINE.sub("", self.data),
                field_type,
                self.line_number,
            )
        if self.field_type == FieldType.SIMPLE or field_type == FieldType.MULTILINE:
            return DataField.create(self.name, self.data, field_type, self.line_number)
        # Only narrowing to SIMPLE is left
        if not force:
            return None
        first_line = self.data.split("\n", 1)[0]
        return DataField.create(self.name, first_line, field_type, self.line_number)


class Stanza:
    """A blank-line delimited block of fields

    Field lookup is case-insensitive while iteration preserves the order in
    which the fields were declared.
    """

    __slots__ = ("first_line", "_fields")

    def __init__(self, first_line: int) -> None:
        self.first_line = first_line
        self._fields: Dict[str, DataField] = {}

    @classmethod
    def parse_next(
        cls,
        lines: Deque[Line],
        lint_state: "LintState",
    ) -> Optional["Stanza"]:
        if not lines:
            return None
        stanza = cls(lines[0].line_number)
        config = lint_state.config
        while lines and not is_blank_line(lines[0]):
            line_number = lines[0].line_number
            field = DataField.parse_next(lines, lint_state)
            if field is None:
                break
            if field.name.lower() in stanza._fields:
                if config.duplicate_field:
                    lint_state.report(
                        f"Duplicate data field in stanza: {field.name}",
                        "duplicateField",
                        SYNTAX_OF_CONTROL_FILES,
                        line=line_number,
                    )
                continue
            if config.empty_fields and not field.data:
                lint_state.report(
                    f"Empty data field: {field.name}",
                    "emptyFields",
                    SYNTAX_OF_CONTROL_FILES,
                    line=line_number,
                )
            stanza._fields[field.name.lower()] = field
        if not stanza._fields:
            return None
        return stanza

    @property
    def fields(self) -> List[DataField]:
        return list(self._fields.values())

    def get_field(self, name: str) -> Optional[DataField]:
        return self._fields.get(name.lower())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._fields

    def __iter__(self) -> Iterator[DataField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def replace_field(self, field: DataField) -> None:
        key = field.name.lower()
        if key not in self._fields:
            raise KeyError(f"The stanza has no field named {field.name}")
        self._fields[key] = field

    def __repr__(self) -> str:
        return f"Stanza(first_line={self.first_line}, fields={self.fields!r})"
