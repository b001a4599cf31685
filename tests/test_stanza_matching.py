import textwrap

import pytest

from deblint.configuration import Configuration
from deblint.control_file import ControlFile
from deblint.control_specs import STANZA_SPECS
from deblint.control_types import ControlType
from deblint.parsing import FieldType
from deblint.stanza_spec import FieldSpec, Requirement, StanzaSpec
from tutil import NORMAL, QUIRKS, STRICT, messages

COPYRIGHT_HEADER = """\
Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/
Upstream-Name: test
"""

FILE_STANZA = """\
Files: *
Copyright: 2024 Someone
License: MIT
"""

LICENSE_STANZA = """\
License: MIT
 Permission is hereby granted.
"""


def _matched(
    text: str,
    config: Configuration,
    control_type: ControlType = ControlType.COPYRIGHT,
) -> ControlFile:
    control_file = ControlFile(config.for_file(control_type))
    control_file.parse(textwrap.dedent(text).splitlines())
    control_file.match_stanzas()
    return control_file


def _spec(name: str, mandatory: bool, repeatable: bool, *fields: str) -> StanzaSpec:
    return StanzaSpec(
        name,
        mandatory,
        repeatable,
        {
            f: FieldSpec(Requirement.MANDATORY, FieldType.SIMPLE)
            for f in fields
        },
    )


def test_copyright_stanzas() -> None:
    text = "\n".join(
        [COPYRIGHT_HEADER, FILE_STANZA, FILE_STANZA, LICENSE_STANZA, LICENSE_STANZA]
    )
    control_file = _matched(text, QUIRKS)
    assert [s.name for s in control_file.specs] == [
        "header stanza",
        "file stanza",
        "file stanza",
        "stand-alone license stanza",
        "stand-alone license stanza",
    ]
    assert control_file.violations == []


def test_optional_stanza_may_be_omitted() -> None:
    control_file = _matched("\n".join([COPYRIGHT_HEADER, FILE_STANZA]), QUIRKS)
    assert [s.name for s in control_file.specs] == ["header stanza", "file stanza"]
    assert control_file.violations == []


def test_unmatched_stanza() -> None:
    control_file = _matched(FILE_STANZA, QUIRKS)
    assert [s.name for s in control_file.specs] == ["blank stanza"]
    assert [(v.message, v.line_number) for v in control_file.violations] == [
        (
            "Cannot match stanza; possibly missing fields or incorrect stanza order:"
            " no. 1 (attempted matching with: header stanza, file stanza,"
            " stand-alone license stanza)",
            1,
        ),
        ("Missing mandatory stanza: header stanza", None),
        ("Missing mandatory stanza: file stanza", None),
    ]


def test_unmatched_stanzas_report_their_position() -> None:
    text = "\n".join([COPYRIGHT_HEADER, FILE_STANZA, "Bogus: one\n", "Bogus: two\n"])
    control_file = _matched(text, QUIRKS)
    assert [s.name for s in control_file.specs] == [
        "header stanza",
        "file stanza",
        "blank stanza",
        "blank stanza",
    ]
    assert [(v.message, v.line_number) for v in control_file.violations] == [
        (
            "Cannot match stanza; possibly missing fields or incorrect stanza order:"
            f" no. {ordinal} (attempted matching with: file stanza,"
            " stand-alone license stanza)",
            line_number,
        )
        for ordinal, line_number in ((3, 8), (4, 10))
    ]


def test_repeatable_spec_survives_unmatched_stanza() -> None:
    text = "\n".join(
        [COPYRIGHT_HEADER, FILE_STANZA, "Bogus: one\n", FILE_STANZA, LICENSE_STANZA]
    )
    control_file = _matched(text, QUIRKS)
    assert [s.name for s in control_file.specs] == [
        "header stanza",
        "file stanza",
        "blank stanza",
        "file stanza",
        "stand-alone license stanza",
    ]
    assert messages(control_file.violations) == [
        "Cannot match stanza; possibly missing fields or incorrect stanza order:"
        " no. 3 (attempted matching with: file stanza, stand-alone license stanza)"
    ]


def test_no_specs_left() -> None:
    stanza = textwrap.dedent(
        """\
        Package: foo
        Version: 1.0
        Architecture: all
        Maintainer: Some One <some@example.com>
        """
    )
    control_file = _matched(
        f"{stanza}\n{stanza}", QUIRKS, ControlType.BINARY_PACKAGE_CONTROL
    )
    assert [s.name for s in control_file.specs] == [
        "binary package control stanza",
        "blank stanza",
    ]
    assert messages(control_file.violations) == [
        "Cannot match stanza; possibly missing fields or incorrect stanza order:"
        " no. 2 (no stanzas were left to match; maybe the error is in an earlier"
        " stanza)"
    ]


def test_last_matching_optional_spec_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    first = _spec("first", False, False, "Name")
    second = _spec("second", False, False, "Name")
    monkeypatch.setitem(STANZA_SPECS, ControlType.COPYRIGHT, (first, second))
    control_file = _matched("Name: x\n", QUIRKS)
    assert list(control_file.specs) == [second]
    assert control_file.violations == []


def test_optional_spec_is_skipped(monkeypatch: pytest.MonkeyPatch) -> None:
    first = _spec("first", False, False, "Name")
    second = _spec("second", False, True, "Other")
    monkeypatch.setitem(STANZA_SPECS, ControlType.COPYRIGHT, (first, second))
    control_file = _matched("Other: x\n\nOther: y\n", QUIRKS)
    assert list(control_file.specs) == [second, second]
    assert control_file.violations == []


def test_mandatory_spec_blocks_later_specs(monkeypatch: pytest.MonkeyPatch) -> None:
    head = _spec("head", True, False, "Head")
    item = _spec("item", True, True, "Item")
    tail = _spec("tail", True, False, "Tail")
    monkeypatch.setitem(STANZA_SPECS, ControlType.COPYRIGHT, (head, item, tail))

    control_file = _matched("Head: x\n\nItem: 1\n\nItem: 2\n\nTail: x\n", QUIRKS)
    assert list(control_file.specs) == [head, item, item, tail]
    assert control_file.violations == []

    control_file = _matched("Head: x\n\nTail: x\n", QUIRKS)
    assert [s.name for s in control_file.specs] == ["head", "blank stanza"]
    assert messages(control_file.violations) == [
        "Cannot match stanza; possibly missing fields or incorrect stanza order:"
        " no. 2 (attempted matching with: item, tail)",
        "Missing mandatory stanza: item",
        "Missing mandatory stanza: tail",
    ]


def test_field_type_is_coerced() -> None:
    text = """\
    Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/
     continued
    Upstream-Name: test

    Files: *
    Copyright: 2024 Someone
    License: MIT
    """
    control_file = _matched(text, NORMAL)
    assert [(v.message, v.check, v.line_number) for v in control_file.violations] == [
        (
            "Invalid field type for field Format: expected SIMPLE, found MULTILINE",
            "fieldType",
            1,
        )
    ]
    header = control_file.stanzas[0]
    assert header.get_field("Format").data == (
        "https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/"
    )
    assert header.get_field("Format").field_type == FieldType.SIMPLE
    # Simple values are widened silently
    assert control_file.stanzas[1].get_field("Files").field_type == FieldType.MULTILINE


def test_recommended_and_custom_fields() -> None:
    text = """\
    Package: foo
    Version: 1.0
    Architecture: all
    Maintainer: Some One <some@example.com>
    XS-Fine: x
    XBB-Foo: x
    Foo: x
    """
    control_file = _matched(text, STRICT, ControlType.BINARY_PACKAGE_CONTROL)
    violations = control_file.violations
    assert messages(violations, "recommendedFields") == [
        "Missing recommended field: Section",
        "Missing recommended field: Priority",
        "Missing recommended field: Description",
    ]
    assert {v.line_number for v in violations if v.check == "recommendedFields"} == {1}
    assert messages(violations, "customFields") == [
        "Custom field: XS-Fine",
        "Custom field: XBB-Foo",
        "Custom field: Foo",
    ]
    assert messages(violations, "customFieldNames") == [
        "Duplicate marker in custom field name: B XBB-Foo",
        "Invalid custom field name: Foo",
    ]
