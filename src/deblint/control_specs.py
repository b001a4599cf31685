from typing import Dict, Mapping, Sequence, Tuple

import deblint.copyright_checks  # noqa: F401  # registers the "copyright" file check
from deblint.checks import FIELD_CHECKS, FILE_CHECKS, STANZA_CHECKS, FileCheck
from deblint.control_types import ControlType
from deblint.parsing import FieldType
from deblint.stanza_spec import FieldSpec, Requirement, StanzaSpec

M = Requirement.MANDATORY
R = Requirement.RECOMMENDED
O = Requirement.OPTIONAL  # noqa: E741

SIMPLE = FieldType.SIMPLE
FOLDED = FieldType.FOLDED
MULTILINE = FieldType.MULTILINE


def _field(
    name: str,
    requirement: Requirement,
    check: str = "noop",
    field_type: FieldType = SIMPLE,
) -> Tuple[str, FieldSpec]:
    return name, FieldSpec(requirement, field_type, FIELD_CHECKS[check])


def _fields(*fields: Tuple[str, FieldSpec]) -> Mapping[str, FieldSpec]:
    return dict(fields)


def _stanza(
    name: str,
    mandatory: bool,
    repeatable: bool,
    fields: Mapping[str, FieldSpec],
    check: str = "noop",
) -> StanzaSpec:
    return StanzaSpec(name, mandatory, repeatable, fields, STANZA_CHECKS[check])


def _dependency_fields(*names: str) -> Sequence[Tuple[str, FieldSpec]]:
    return [_field(n, O, "dependency", FOLDED) for n in names]


_BUILD_RELATION_FIELDS = _dependency_fields(
    "Build-Depends",
    "Build-Depends-Indep",
    "Build-Depends-Arch",
    "Build-Conflicts",
    "Build-Conflicts-Indep",
    "Build-Conflicts-Arch",
)

_BINARY_RELATION_FIELDS = _dependency_fields(
    "Depends",
    "Pre-Depends",
    "Recommends",
    "Suggests",
    "Enhances",
    "Breaks",
    "Conflicts",
)

_VCS_FIELDS = (
    _field("Vcs-Arch", O),
    _field("Vcs-Bzr", O),
    _field("Vcs-Cvs", O),
    _field("Vcs-Darcs", O),
    _field("Vcs-Git", O, "git-vcs"),
    _field("Vcs-Hg", O, "hg-vcs"),
    _field("Vcs-Mtn", O),
    _field("Vcs-Svn", O),
)

_CHECKSUM_FIELDS = (
    _field("Checksums-Sha1", M, "sha1", MULTILINE),
    _field("Checksums-Sha256", M, "sha256", MULTILINE),
    _field("Files", M, "file-list", MULTILINE),
)


SOURCE_PACKAGE_CONTROL_SPECS: Tuple[StanzaSpec, ...] = (
    _stanza(
        "general stanza",
        True,
        False,
        _fields(
            _field("Source", M, "source"),
            _field("Maintainer", M, "address"),
            _field("Uploaders", O, "multi-address", FOLDED),
            _field("Section", R, "section"),
            _field("Priority", R, "priority"),
            *_BUILD_RELATION_FIELDS,
            _field("Standards-Version", M, "standards-version"),
            _field("Homepage", O, "url"),
            _field("Vcs-Browser", O, "url"),
            *_VCS_FIELDS,
            _field("Testsuite", O, "dependency"),
            _field("Rules-Requires-Root", O, "rules-requires-root"),
        ),
        "source-and-vcs",
    ),
    _stanza(
        "binary package stanza",
        True,
        True,
        _fields(
            _field("Package", M, "package-name"),
            _field("Architecture", M, "single-architecture"),
            _field("Section", R, "section"),
            _field("Priority", R, "priority"),
            _field("Essential", O, "boolean"),
            *_BINARY_RELATION_FIELDS,
            _field("Description", R, "description", MULTILINE),
            _field("Homepage", O, "url"),
            _field("Built-Using", O, "exact-dependency"),
            _field("Package-Type", O, "package-type"),
        ),
    ),
)

BINARY_PACKAGE_CONTROL_SPECS: Tuple[StanzaSpec, ...] = (
    _stanza(
        "binary package control stanza",
        True,
        False,
        _fields(
            _field("Package", M, "package-name"),
            _field("Source", O, "source"),
            _field("Version", M, "version"),
            _field("Section", R, "section"),
            _field("Priority", R, "priority"),
            _field("Architecture", M, "single-architecture"),
            _field("Essential", O, "boolean"),
            *_BINARY_RELATION_FIELDS,
            _field("Installed-Size", O, "size"),
            _field("Maintainer", M, "address"),
            _field("Description", R, "description", MULTILINE),
            _field("Homepage", O, "url"),
            _field("Built-Using", O, "exact-dependency"),
        ),
        "source",
    ),
)

SOURCE_CONTROL_SPECS: Tuple[StanzaSpec, ...] = (
    _stanza(
        "source stanza",
        True,
        False,
        _fields(
            _field("Format", M, "format-version"),
            _field("Source", M, "source"),
            _field("Binary", O, "binary-list", FOLDED),
            _field("Architecture", O, "single-architecture"),
            _field("Version", M, "version"),
            _field("Maintainer", M, "address"),
            _field("Uploaders", O, "multi-address", FOLDED),
            _field("Homepage", O, "url"),
            _field("Vcs-Browser", O, "url"),
            *_VCS_FIELDS,
            _field("Testsuite", O, "dependency"),
            _field("Dgit", O, "dgit", FOLDED),
            _field("Standards-Version", M, "standards-version"),
            *_BUILD_RELATION_FIELDS,
            _field("Package-List", R, "package-list", MULTILINE),
            *_CHECKSUM_FIELDS,
        ),
        "source-control",
    ),
)

CHANGES_SPECS: Tuple[StanzaSpec, ...] = (
    _stanza(
        "changes stanza",
        True,
        False,
        _fields(
            _field("Format", M, "format-version"),
            _field("Date", M, "date"),
            _field("Source", M, "source"),
            _field("Binary", M, "binary-list", FOLDED),
            _field("Architecture", O, "single-architecture"),
            _field("Version", M, "version"),
            _field("Distribution", M, "distribution"),
            _field("Urgency", R, "urgency"),
            _field("Maintainer", M, "address"),
            _field("Changed-By", O, "address"),
            _field("Description", R, "description", MULTILINE),
            _field("Closes", O, "number-list"),
            _field("Changes", M, "change-list", MULTILINE),
            *_CHECKSUM_FIELDS,
        ),
        "source-and-checksum",
    ),
)

COPYRIGHT_SPECS: Tuple[StanzaSpec, ...] = (
    _stanza(
        "header stanza",
        True,
        False,
        _fields(
            _field("Format", M, "copyright-format"),
            _field("Upstream-Name", O, "package-name"),
            _field("Upstream-Contact", O, "upstream-contact"),
            _field("Source", O, "copyright-source", MULTILINE),
            _field("Disclaimer", O, field_type=MULTILINE),
            _field("Comment", O, field_type=MULTILINE),
            _field("License", O, "license", MULTILINE),
            _field("Copyright", O, field_type=MULTILINE),
        ),
        "copyright-header",
    ),
    _stanza(
        "file stanza",
        True,
        True,
        _fields(
            _field("Files", M, "copyright-file-list", MULTILINE),
            _field("Copyright", M, field_type=MULTILINE),
            _field("License", M, "license", MULTILINE),
            _field("Comment", O, field_type=MULTILINE),
        ),
    ),
    _stanza(
        "stand-alone license stanza",
        False,
        True,
        _fields(
            _field("License", M, "license", MULTILINE),
            _field("Comment", O, field_type=MULTILINE),
        ),
    ),
)


STANZA_SPECS: Dict[ControlType, Tuple[StanzaSpec, ...]] = {
    ControlType.SOURCE_PACKAGE_CONTROL: SOURCE_PACKAGE_CONTROL_SPECS,
    ControlType.BINARY_PACKAGE_CONTROL: BINARY_PACKAGE_CONTROL_SPECS,
    ControlType.SOURCE_CONTROL: SOURCE_CONTROL_SPECS,
    ControlType.CHANGES: CHANGES_SPECS,
    ControlType.COPYRIGHT: COPYRIGHT_SPECS,
}

FILE_CHECK_BY_TYPE: Dict[ControlType, FileCheck] = {
    ct: FILE_CHECKS["copyright" if ct == ControlType.COPYRIGHT else "noop"]
    for ct in ControlType
}
