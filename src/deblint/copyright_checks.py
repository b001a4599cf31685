"""Checks spanning all stanzas of a debian/copyright file

File patterns use the `Files` field syntax of the machine-readable copyright
format: `*` matches any run of characters (including `/`), `?` matches a
single character and a backslash escapes one of `*`, `?` and `\\`.
"""
import functools
import re
from typing import Dict, Iterator, List, Set, Tuple, TYPE_CHECKING

from deblint.checks import file_check
from deblint.parsing import DataField, Stanza
from deblint.reference_data import COPYRIGHT_FILES_FIELD

if TYPE_CHECKING:
    from deblint.control_file import ControlFile
    from deblint.linting.lint_util import LintState


FILE_STANZA = "file stanza"
STAND_ALONE_LICENSE_STANZA = "stand-alone license stanza"
PUBLIC_DOMAIN = "public-domain"

_ESCAPED_CHARACTERS = frozenset("()[{*+.$^\\|?")
_GENERALITY_TESTERS = ("a", "b", "c")
_RE_UNESCAPED_STAR = re.compile(r"(?<!\\)\*")
_RE_UNESCAPED_QUESTION_MARK = re.compile(r"(?<!\\)\?")
_RE_LICENSE_JOIN = re.compile(r" (?:and|or) ")


@functools.lru_cache
def to_regex(pattern: str) -> re.Pattern:
    """Compile a file pattern to an anchored regular expression

    >>> to_regex("hello?there.txt").pattern
    '^(\\\\./)?hello.there\\\\.txt$'
    >>> to_regex("./src/./*").pattern
    '^(\\\\./)?src/.*$'
    """
    while pattern.startswith("./"):
        pattern = pattern[len("./") :]
    pattern = pattern.replace("/./", "/")
    parts = ["^(\\./)?"]
    chars = iter(pattern)
    for c in chars:
        if c == "\\":
            escaped = next(chars, "\\")
            parts.append(re.escape(escaped))
        elif c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c in _ESCAPED_CHARACTERS:
            parts.append("\\" + c)
        else:
            parts.append(c)
    parts.append("$")
    return re.compile("".join(parts))


def is_more_generic(first: str, second: str) -> bool:
    """Whether `first` matches every path that `second` matches

    The wildcards of `second` are substituted with runs of a few different
    filler characters, so the answer is a heuristic rather than a proof.

    >>> is_more_generic("src/*", "src/foo.c")
    True
    >>> is_more_generic("src/foo.c", "src/*")
    False
    """
    regex = to_regex(first)
    filler_length = len(first) + len(second) + 1
    for tester in _GENERALITY_TESTERS:
        candidate = _RE_UNESCAPED_STAR.sub(tester * filler_length, second)
        candidate = _RE_UNESCAPED_QUESTION_MARK.sub(tester, candidate)
        if not regex.fullmatch(candidate):
            return False
    return True


def simple_license_name(name: str) -> str:
    """Normalize the license name used for cross-referencing stanzas

    >>> simple_license_name("GPL-3.0")
    'GPL-3'
    >>> simple_license_name("Apache-2.0.0 with Font exception")
    'Apache-2 with Font exception'
    >>> simple_license_name("BSD-1")
    'BSD'
    """
    base, sep, rest = name.partition(" ")
    while base.endswith(".0"):
        base = base[: -len(".0")]
    if base.endswith("-1"):
        base = base[: -len("-1")]
    return base + sep + rest


def _stanzas_of(
    control_file: "ControlFile",
    spec_name: str,
) -> Iterator[Stanza]:
    for stanza, spec in zip(control_file.stanzas, control_file.specs):
        if spec.name == spec_name:
            yield stanza


def _file_patterns(field: DataField) -> List[str]:
    return [p for p in (line.strip() for line in field.data.split("\n")) if p]


def lint_file_stanzas(control_file: "ControlFile", lint_state: "LintState") -> None:
    """Check the file patterns of all file stanzas against each other

    A later stanza overrides an earlier one for the files both match, so a
    pattern that is more generic than an earlier one hides it.
    """
    config = lint_state.config
    # Ordered, for stable output
    previous_patterns: Dict[str, None] = {}
    for stanza in _stanzas_of(control_file, FILE_STANZA):
        field = stanza.get_field("Files")
        if field is None:
            continue
        patterns = _file_patterns(field)
        with lint_state.at_line(field.line_number):
            if config.redundant_file_pattern:
                _check_redundant_patterns(patterns, previous_patterns, lint_state)
            if config.duplicate_file_pattern:
                _check_duplicate_patterns(patterns, lint_state)
            if config.copyright_file_pattern_generality:
                for current in patterns:
                    for previous in previous_patterns:
                        if is_more_generic(current, previous):
                            lint_state.report(
                                "More generic patterns should precede specific"
                                f" ones: {previous} and {current}",
                                "copyrightFilePatternGenerality",
                                COPYRIGHT_FILES_FIELD,
                            )
        previous_patterns.update(dict.fromkeys(patterns))


def _check_redundant_patterns(
    patterns: List[str],
    previous_patterns: Dict[str, None],
    lint_state: "LintState",
) -> None:
    for idx, first in enumerate(patterns):
        if first in previous_patterns:
            lint_state.report(
                f"Duplicate file pattern: {first}",
                "redundantFilePattern",
                COPYRIGHT_FILES_FIELD,
            )
        for second in patterns[idx + 1 :]:
            if is_more_generic(first, second) or is_more_generic(second, first):
                lint_state.report(
                    f"File stanza includes redundant pattern: {first} and {second}"
                    " cannot both be needed",
                    "redundantFilePattern",
                    COPYRIGHT_FILES_FIELD,
                )


def _check_duplicate_patterns(patterns: List[str], lint_state: "LintState") -> None:
    seen: Set[str] = set()
    reported: Set[str] = set()
    for pattern in patterns:
        if pattern not in seen:
            seen.add(pattern)
            continue
        if pattern in reported:
            continue
        reported.add(pattern)
        lint_state.report(
            f"Duplicate file pattern in the same field: {pattern}",
            "duplicateFilePattern",
            COPYRIGHT_FILES_FIELD,
        )


def _license_declarations(field: DataField) -> Tuple[List[str], bool]:
    lines = field.data.split("\n")
    short_names = lines[0].strip()
    has_explanation = short_names != field.data.strip()
    declarations = _RE_LICENSE_JOIN.split(short_names.replace(",", ""))
    return [simple_license_name(d) for d in declarations], has_explanation


def check_copyright_names(control_file: "ControlFile", lint_state: "LintState") -> None:
    """Cross-check the licenses used by file stanzas with the stand-alone ones

    A license used without an explanation in a file stanza needs a
    stand-alone license stanza, and a stand-alone stanza must be needed by
    some file stanza.
    """
    config = lint_state.config
    if not config.license_declarations:
        return
    # License name -> line of its first use
    names: Dict[str, int] = {}
    optional_names: Set[str] = set()
    for stanza in _stanzas_of(control_file, FILE_STANZA):
        field = stanza.get_field("License")
        if field is None:
            continue
        declarations, has_explanation = _license_declarations(field)
        if has_explanation:
            optional_names.update(declarations)
        else:
            for name in declarations:
                names.setdefault(name, field.line_number)
    optional_names.difference_update(names)
    optional_names.discard(PUBLIC_DOMAIN)

    for stanza in _stanzas_of(control_file, STAND_ALONE_LICENSE_STANZA):
        field = stanza.get_field("License")
        if field is None:
            continue
        short_name = simple_license_name(field.data.split("\n", 1)[0].strip())
        if names.pop(short_name, None) is not None:
            continue
        optional = short_name in optional_names
        optional_names.discard(short_name)
        with lint_state.at_line(field.line_number):
            if optional:
                if config.license_declared_after_explanation:
                    lint_state.report(
                        "Stand-alone license stanza is not required; this license"
                        f" has an explanation: {short_name}",
                        "licenseDeclaredAfterExplanation",
                    )
            else:
                lint_state.report(
                    "Stand-alone license stanza is not required; maybe the license"
                    f" was already defined: {short_name}",
                    "licenseDeclarations",
                )

    for name in sorted(names):
        if name != PUBLIC_DOMAIN:
            lint_state.report(f"License text is missing: {name}", line=names[name])


@file_check("copyright")
def check_copyright_file(control_file: "ControlFile", lint_state: "LintState") -> None:
    lint_file_stanzas(control_file, lint_state)
    check_copyright_names(control_file, lint_state)
