import textwrap

import pytest

from deblint.control_types import ControlType
from deblint.copyright_checks import is_more_generic, simple_license_name, to_regex
from tutil import EXACT, NORMAL, lint_text, messages

HEADER = """\
Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/
Upstream-Name: test
Upstream-Contact: test <test@test.org>
Source: https://salsa.debian.org/debian/debmake-doc
"""


def _copyright(*stanzas: str) -> str:
    return "\n".join(
        [HEADER] + [textwrap.dedent(s) for s in stanzas]
    )


def _files(patterns: str, license_text: str = "MIT\n Permission is granted.") -> str:
    return f"Files: {patterns}\nCopyright: copyright text\nLicense: {license_text}\n"


@pytest.mark.parametrize(
    "pattern,regex",
    [
        ("a", "^(\\./)?a$"),
        ("hello?there.txt", "^(\\./)?hello.there\\.txt$"),
        ("file(name)*", "^(\\./)?file\\(name\\).*$"),
        ("./src/./lib/*", "^(\\./)?src/lib/.*$"),
        ("\\*star\\?", "^(\\./)?\\*star\\?$"),
    ],
)
def test_to_regex(pattern: str, regex: str) -> None:
    assert to_regex(pattern).pattern == regex


@pytest.mark.parametrize(
    "first,second,expected",
    [
        ("*", "*", True),
        ("a", "*", False),
        ("a", "?", False),
        ("*", "a", True),
        ("*", "?", True),
        ("?", "*", False),
        ("??????????", "*", False),
        ("*", "??????????", True),
        ("?", "a", True),
        ("a*a", "aa?a", True),
        ("aa?a", "a*a", False),
        (
            "images/ship/pointedstick?vanguard*",
            "images/ship/pointedstick?vanguard*",
            True,
        ),
        ("src/*", "./src/foo.c", True),
        ("src/*.c", "src/*.h", False),
    ],
)
def test_is_more_generic(first: str, second: str, expected: bool) -> None:
    assert is_more_generic(first, second) is expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("GPL-3.0", "GPL-3"),
        ("GPL-3.0.0", "GPL-3"),
        ("BSD-1", "BSD"),
        ("MIT", "MIT"),
        ("Apache-2.0 with Font exception", "Apache-2 with Font exception"),
    ],
)
def test_simple_license_name(name: str, expected: str) -> None:
    assert simple_license_name(name) == expected


def test_valid_copyright_file() -> None:
    text = _copyright(_files("*", "test\n description"))
    assert lint_text(text, EXACT, ControlType.COPYRIGHT) == []


def test_license_declared_after_explanation() -> None:
    text = _copyright(
        _files("*", "test\n description"),
        "License: test\n license body\n",
    )
    violations = lint_text(text, EXACT, ControlType.COPYRIGHT)
    assert [(v.check, v.line_number) for v in violations] == [
        ("licenseDeclaredAfterExplanation", 11)
    ]

    config = EXACT.with_overrides(disable=["licenseDeclaredAfterExplanation"])
    assert lint_text(text, config, ControlType.COPYRIGHT) == []


def test_license_text_is_missing() -> None:
    violations = lint_text(
        _copyright(_files("*", "test")), EXACT, ControlType.COPYRIGHT
    )
    assert [(v.message, v.check, v.line_number) for v in violations] == [
        ("License text is missing: test", None, 8)
    ]


def test_license_text_matches_simplified_name() -> None:
    text = _copyright(
        _files("*", "GPL-3.0"),
        "License: GPL-3\n license body\n",
    )
    assert lint_text(text, EXACT, ControlType.COPYRIGHT) == []


def test_public_domain_needs_explanation() -> None:
    violations = lint_text(
        _copyright(_files("*", "public-domain")), EXACT, ControlType.COPYRIGHT
    )
    assert [v.check for v in violations] == ["licenseName"]


def test_public_domain_declared_separately() -> None:
    text = _copyright(
        _files("*", "public-domain\n body"),
        "License: public-domain\n stuff\n",
    )
    violations = lint_text(text, EXACT, ControlType.COPYRIGHT)
    assert [v.check for v in violations] == ["licenseDeclarations"]


def test_valid_public_domain() -> None:
    text = _copyright(_files("*", "public-domain\n description"))
    assert lint_text(text, EXACT, ControlType.COPYRIGHT) == []


def test_unused_license_stanza() -> None:
    text = _copyright(
        _files("*", "MIT"),
        "License: MIT\n license body\n",
        "License: Apache-2.0\n license body\n",
    )
    violations = lint_text(text, EXACT, ControlType.COPYRIGHT)
    assert messages(violations) == [
        "Stand-alone license stanza is not required; maybe the license was already"
        " defined: Apache-2"
    ]


def test_specific_pattern_after_generic_one() -> None:
    text = _copyright(_files("*"), _files("src/foo.c"))
    violations = lint_text(text, NORMAL, ControlType.COPYRIGHT)
    assert messages(violations, "copyrightFilePatternGenerality") == []


def test_generic_pattern_after_specific_one() -> None:
    text = _copyright(_files("src/foo.c"), _files("src/*"))
    violations = lint_text(text, NORMAL, ControlType.COPYRIGHT)
    assert [
        (v.message, v.line_number)
        for v in violations
        if v.check == "copyrightFilePatternGenerality"
    ] == [
        (
            "More generic patterns should precede specific ones: src/foo.c and src/*",
            11,
        )
    ]


def test_redundant_patterns_in_one_field() -> None:
    text = _copyright(_files("src/*\n src/foo.c\n debian/*"))
    violations = lint_text(text, EXACT, ControlType.COPYRIGHT)
    assert messages(violations) == [
        "File stanza includes redundant pattern: src/* and src/foo.c cannot both"
        " be needed"
    ]
    config = EXACT.with_overrides(disable=["redundantFilePattern"])
    assert lint_text(text, config, ControlType.COPYRIGHT) == []


def test_duplicate_patterns_in_one_field() -> None:
    text = _copyright(_files("a\n a\n a"))
    config = EXACT.with_overrides(disable=["redundantFilePattern"])
    violations = lint_text(text, config, ControlType.COPYRIGHT)
    assert messages(violations) == ["Duplicate file pattern in the same field: a"]


def test_pattern_repeated_in_later_stanza() -> None:
    text = _copyright(_files("debian/*"), _files("debian/*"))
    config = EXACT.with_overrides(disable=["copyrightFilePatternGenerality"])
    violations = lint_text(text, config, ControlType.COPYRIGHT)
    assert [(v.message, v.check) for v in violations] == [
        ("Duplicate file pattern: debian/*", "redundantFilePattern")
    ]
