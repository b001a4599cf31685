import io
import textwrap

import pytest

from deblint.commands.deblint_cmd.output import no_fancy_output
from deblint.control_file import ControlFile
from deblint.control_types import ControlType
from deblint.exceptions import (
    ControlFileStructureError,
    PGPEnvelopeError,
    StageAlreadyRunError,
)
from deblint.linting.lint_impl import lint_file
from deblint.linting.lint_util import LintReport, TermLintReport
from deblint.parsing import SYNTAX_OF_CONTROL_FILES, FieldType
from tutil import NORMAL, QUIRKS, lint_text

SOURCE_PACKAGE_CONTROL = """\
Source: foo
Maintainer: Some One <some@example.com>
Section: misc
Priority: optional
Build-Depends: debhelper-compat (= 13),
 python3:any
Standards-Version: 4.6.2
Homepage: https://example.com/foo
Vcs-Git: https://salsa.debian.org/debian/foo.git -b debian/latest
Rules-Requires-Root: no

# Comments are fine here
Package: foo
Architecture: any
Depends: ${misc:Depends}, ${shlibs:Depends}
Description: does foo things
 Foo does things.
 .
 More detail.
"""

DSC_BODY = f"""\
Format: 3.0 (quilt)
Source: example
Version: 1.2-1
Maintainer: Some One <some@example.com>
Standards-Version: 4.6.2
Checksums-Sha1:
 {"a" * 40} 571925 example_1.2.orig.tar.gz
Checksums-Sha256:
 {"b" * 64} 571925 example_1.2.orig.tar.gz
Files:
 c6f698f19f2a2aa07dbb9bbda90a2754 571925 example_1.2.orig.tar.gz
"""

PGP_HEAD = """\
-----BEGIN PGP SIGNED MESSAGE-----
Hash: SHA256

"""

PGP_TAIL = """\
-----BEGIN PGP SIGNATURE-----
iQIzBAEBCAAdFiEE
-----END PGP SIGNATURE-----
"""


def _parsed(
    lines,
    config,
    control_type: ControlType = ControlType.COPYRIGHT,
) -> ControlFile:
    control_file = ControlFile(config.for_file(control_type))
    control_file.parse(lines)
    return control_file


def test_valid_source_package_control() -> None:
    violations = lint_text(
        SOURCE_PACKAGE_CONTROL, NORMAL, ControlType.SOURCE_PACKAGE_CONTROL
    )
    assert violations == []


def test_minimal_source_package_control() -> None:
    text = (
        "Source: foo\nMaintainer: A <a@b.com>\nStandards-Version: 4.6.2\n\n"
        "Package: foo\nArchitecture: any\nDescription: x\n y\n"
    )
    control_file = ControlFile(NORMAL.for_file(ControlType.SOURCE_PACKAGE_CONTROL))
    assert control_file.lint(text.splitlines()) == []
    assert [s.name for s in control_file.specs] == [
        "general stanza",
        "binary package stanza",
    ]


def test_whitespace_only_stanza_separator() -> None:
    text = (
        "Source: foo\nMaintainer: A <a@b.com>\nStandards-Version: 4.6.2\n \n"
        "Package: foo\nArchitecture: any\nDescription: x\n y\n"
    )
    control_file = ControlFile(NORMAL.for_file(ControlType.SOURCE_PACKAGE_CONTROL))
    assert control_file.lint(text.splitlines()) == []
    assert [len(s) for s in control_file.stanzas] == [3, 3]
    field = control_file.stanzas[0].get_field("Standards-Version")
    assert field.field_type == FieldType.SIMPLE


def test_signed_dsc() -> None:
    text = PGP_HEAD + DSC_BODY + PGP_TAIL
    control_file = ControlFile(QUIRKS.for_file(ControlType.SOURCE_CONTROL))
    assert control_file.lint(text.splitlines()) == []
    assert len(control_file.stanzas) == 1
    assert control_file.stanzas[0].first_line == 4


def test_unsigned_dsc() -> None:
    assert lint_text(DSC_BODY, QUIRKS, ControlType.SOURCE_CONTROL) == []


@pytest.mark.parametrize(
    "text,message",
    [
        (
            "-----BEGIN PGP SIGNED MESSAGE-----\nFormat: 1.8\n",
            "Unrecognized PGP signature format",
        ),
        (
            PGP_HEAD + DSC_BODY,
            "PGP signature is not present",
        ),
    ],
)
def test_broken_pgp_envelope(text: str, message: str) -> None:
    control_file = ControlFile(QUIRKS.for_file(ControlType.SOURCE_CONTROL))
    with pytest.raises(PGPEnvelopeError) as e:
        control_file.parse(text.splitlines())
    assert e.value.message == message


def test_pgp_signature_only() -> None:
    control_file = ControlFile(QUIRKS.for_file(ControlType.CHANGES))
    with pytest.raises(ControlFileStructureError) as e:
        control_file.parse((PGP_HEAD + PGP_TAIL).splitlines())
    assert e.value.message == "Control file only contains a PGP signature"


def test_empty_file() -> None:
    control_file = ControlFile(QUIRKS.for_file(ControlType.COPYRIGHT))
    with pytest.raises(ControlFileStructureError) as e:
        control_file.parse([])
    assert e.value.message == "Control file is empty"


def test_comments_are_reported_outside_debian_control() -> None:
    lines = ["# hello", "Files: *", "# there"]
    control_file = _parsed(lines, NORMAL)
    assert [(v.check, v.line_number) for v in control_file.violations] == [
        ("comments", 1),
        ("comments", 3),
    ]
    assert [f.name for f in control_file.stanzas[0]] == ["Files"]

    control_file = _parsed(lines, NORMAL, ControlType.SOURCE_PACKAGE_CONTROL)
    assert control_file.violations == []

    control_file = _parsed(lines, QUIRKS)
    assert control_file.violations == []


def test_whitespace_checks() -> None:
    config = QUIRKS.with_overrides(enable=["trailingSpace", "emptyStanzaSeparators"])
    control_file = _parsed(["Source: foo ", "  ", "Package: foo"], config)
    assert [(v.check, v.line_number) for v in control_file.violations] == [
        ("trailingSpace", 1),
        ("trailingSpace", 2),
        ("emptyStanzaSeparators", 2),
    ]
    assert control_file.violations[0].message == "Line has trailing whitespace: Source: foo"
    assert len(control_file.stanzas) == 2


def test_line_without_colon_ends_parsing() -> None:
    control_file = _parsed(["Source: foo", "garbage", "", "Package: bar"], QUIRKS)
    assert len(control_file.stanzas) == 1
    assert [(v.message, v.line_number) for v in control_file.violations] == [
        ("Data field declaration is missing colon: garbage", 2)
    ]


def test_stages_run_only_once() -> None:
    control_file = ControlFile(QUIRKS.for_file(ControlType.SOURCE_CONTROL))
    control_file.lint(DSC_BODY.splitlines())
    with pytest.raises(StageAlreadyRunError):
        control_file.parse(DSC_BODY.splitlines())
    with pytest.raises(StageAlreadyRunError):
        control_file.match_stanzas()
    with pytest.raises(StageAlreadyRunError):
        control_file.lint_stanzas()


def test_stages_run_in_order() -> None:
    control_file = ControlFile(QUIRKS.for_file(ControlType.SOURCE_CONTROL))
    with pytest.raises(AssertionError):
        control_file.match_stanzas()
    with pytest.raises(AssertionError):
        control_file.lint_stanzas()


def test_violations_are_forwarded_to_report() -> None:
    lint_report = LintReport()
    control_file = ControlFile(
        NORMAL.for_file(ControlType.COPYRIGHT),
        lint_report=lint_report,
    )
    control_file.parse(["# hello", "Files: *"])
    assert lint_report.violations_by_file["copyright"] == control_file.violations
    assert lint_report.violations_count["comments"] == 1
    assert lint_report.has_violations


def test_term_report_output() -> None:
    stream = io.StringIO()
    lint_report = TermLintReport(no_fancy_output(stream), display="both")
    control_file = ControlFile(
        NORMAL.for_file(ControlType.COPYRIGHT, "debian/copyright"),
        lint_report=lint_report,
    )
    control_file.parse(["# hello", "Files: *"])
    lint_report.finish_report()
    assert stream.getvalue() == textwrap.dedent(
        f"""\
        Error: File: debian/copyright:1: [comments] Comments are only allowed in debian/control files <{SYNTAX_OF_CONTROL_FILES}>
            1: # hello
        Found 1 problem(s)
        """
    )


def test_lint_file_reports_structural_errors(tmp_path) -> None:
    empty_file = tmp_path / "copyright"
    empty_file.write_text("")
    lint_report = LintReport()
    filename = str(empty_file)
    lint_file(filename, QUIRKS.for_file(ControlType.COPYRIGHT, filename), lint_report)
    assert lint_report.structural_errors == {filename: "Control file is empty"}
    assert not lint_report.has_violations
