import dataclasses
import operator
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

from deblint.control_types import ControlType
from deblint.exceptions import UnknownCheckError, UnknownPresetError


@dataclasses.dataclass(slots=True, frozen=True)
class CheckDefinition:
    name: str
    attribute: str
    description: str

    @property
    def accessor(self) -> Callable[["Configuration"], bool]:
        return operator.attrgetter(self.attribute)


def _check(name: str, attribute: str, description: str) -> CheckDefinition:
    return CheckDefinition(name, attribute, description)


ALL_CHECKS: Tuple[CheckDefinition, ...] = (
    _check(
        "addressStyle",
        "address_style",
        "An address (name and email) not using the proper format.",
    ),
    _check(
        "archInversion",
        "arch_inversion",
        "Mixed inverted and non-inverted architectures.",
    ),
    _check(
        "comments",
        "comments",
        "Comments outside of debian/control files.",
    ),
    _check(
        "copyrightFilePatternGenerality",
        "copyright_file_pattern_generality",
        "Whether more generic file patterns are declared first in copyright files.",
    ),
    _check(
        "copyrightSourceStyle",
        "copyright_source_style",
        "A Source field in a debian/copyright file that is not a single URL address.",
    ),
    _check(
        "customFieldNames",
        "custom_field_names",
        "A user-defined field not following the naming scheme.",
    ),
    _check(
        "customFields",
        "custom_fields",
        "Fields that are not defined by Debian Policy or the copyright format."
        " When disabled, fields are not checked for 'customFieldNames'.",
    ),
    _check(
        "customLicenseException",
        "custom_license_exception",
        "License exception not defined by the copyright format.",
    ),
    _check(
        "customUrgencies",
        "custom_urgencies",
        "An Urgency field value not defined by Debian Policy.",
    ),
    _check(
        "debianInstallerSection",
        "debian_installer_section",
        "A Section field value of 'debian-installer'.",
    ),
    _check(
        "descriptionReservedSyntax",
        "description_reserved_syntax",
        "Reserved syntax used in descriptions.",
    ),
    _check(
        "dgitExtraData",
        "dgit_extra_data",
        "Extra data specified in a Dgit field, reserved for future expansion.",
    ),
    _check(
        "duplicateArchitecture",
        "duplicate_architecture",
        "An Architecture field declaring the same architecture more than once.",
    ),
    _check(
        "duplicateField",
        "duplicate_field",
        "A field declared twice in the same stanza.",
    ),
    _check(
        "duplicateFilePattern",
        "duplicate_file_pattern",
        "A file pattern repeated within the same field.",
    ),
    _check(
        "duplicateFiles",
        "duplicate_files",
        "Duplicate entry in a file list.",
    ),
    _check(
        "duplicateIssueNumbers",
        "duplicate_issue_numbers",
        "A Closes field with repeated issue numbers.",
    ),
    _check(
        "duplicatePackages",
        "duplicate_packages",
        "Duplicate entry in a package list.",
    ),
    _check(
        "duplicateVcs",
        "duplicate_vcs",
        "More than one version control fields declared.",
    ),
    _check(
        "email",
        "email",
        "An email address with an invalid format.",
    ),
    _check(
        "emptyFields",
        "empty_fields",
        "Fields with no value specified.",
    ),
    _check(
        "emptyStanzaSeparators",
        "empty_stanza_separators",
        "Stanza separators that contain whitespaces.",
    ),
    _check(
        "exactFormatVersion",
        "exact_format_version",
        "An unrecognized format version.",
    ),
    _check(
        "extraPriority",
        "extra_priority",
        "The use of the deprecated Priority value 'extra'.",
    ),
    _check(
        "fieldName",
        "field_name",
        "A field name using invalid characters or formatting.",
    ),
    _check(
        "fieldNameCapitalization",
        "field_name_capitalization",
        "Field name that is not capitalized according to the established conventions.",
    ),
    _check(
        "fieldType",
        "field_type",
        "A field with an invalid type.",
    ),
    _check(
        "fileListIndent",
        "file_list_indent",
        "A file list not using a single space as indentation.",
    ),
    _check(
        "futureDate",
        "future_date",
        "A future date specified in a Date field.",
    ),
    _check(
        "leadingEmptyLine",
        "leading_empty_line",
        "A field that should begin with an empty line but doesn't.",
    ),
    _check(
        "licenseDeclarations",
        "license_declarations",
        "Declared licenses that are not used, or used licenses that are not declared.",
    ),
    _check(
        "licenseDeclaredAfterExplanation",
        "license_declared_after_explanation",
        "A license that had an explanation every time it was used, and still has a"
        " stand-alone license stanza.",
    ),
    _check(
        "licenseName",
        "license_name",
        "Short license name(s) not properly formatted. When disabled, debian/copyright"
        " licenses are also not checked for 'customLicenseException'.",
    ),
    _check(
        "maintainerNameFullStop",
        "maintainer_name_full_stop",
        "A maintainer name that contains a full stop.",
    ),
    _check(
        "missingSectionOrPriority",
        "missing_section_or_priority",
        "A missing section or priority value in a .changes file's file list.",
    ),
    _check(
        "multipleDistributions",
        "multiple_distributions",
        "A Distribution field with more than one distribution specified.",
    ),
    _check(
        "recommendedFields",
        "recommended_fields",
        "A recommended field that is not present in the stanza.",
    ),
    _check(
        "redundantFilePattern",
        "redundant_file_pattern",
        "A file pattern that is not necessary, because there is a more generic pattern"
        " in the same field.",
    ),
    _check(
        "redundantPackageType",
        "redundant_package_type",
        "A Package-Type field with a value of 'deb' in a debian/control file.",
    ),
    _check(
        "sourceRedundantVersion",
        "source_redundant_version",
        "A version specified in a Source field that matches the value of the Version field.",
    ),
    _check(
        "spaceAfterColon",
        "space_after_colon",
        "A colon that has no space after it, and doesn't end the line.",
    ),
    _check(
        "strictArch",
        "strict_arch",
        "An architecture not recognized.",
    ),
    _check(
        "strictCopyrightFormatVersion",
        "strict_copyright_format_version",
        "A copyright format version not recognized.",
    ),
    _check(
        "strictSection",
        "strict_section",
        "A section or area name not recognized.",
    ),
    _check(
        "strictStandardsVersion",
        "strict_standards_version",
        "A standards version not recognized.",
    ),
    _check(
        "trailingSpace",
        "trailing_space",
        "Line that ends with a trailing whitespace.",
    ),
    _check(
        "unknownPackageType",
        "unknown_package_type",
        "An unrecognized type is used in a Package-Type field. Currently, the"
        " recognized types are 'deb' and 'udeb'. Used in debian/control files.",
    ),
    _check(
        "unknownPriority",
        "unknown_priority",
        "A priority name not recognized.",
    ),
    _check(
        "upstreamContactStyle",
        "upstream_contact_style",
        "An Upstream-Contact field that is not a single URL address or a"
        " Maintainer-style contact. Used in debian/copyright files.",
    ),
    _check(
        "upstreamVersionStyle",
        "upstream_version_style",
        "An upstream version using invalid syntax.",
    ),
    _check(
        "urgencyDescriptionParentheses",
        "urgency_description_parentheses",
        "Commentary in an Urgency field that is not wrapped in parentheses."
        " Used in .changes files.",
    ),
    _check(
        "url",
        "url",
        "A URL using an invalid format or unknown schema.",
    ),
    _check(
        "urlExists",
        "url_exists",
        "A URL address that is not reachable.",
    ),
    _check(
        "urlForceHttps",
        "url_force_https",
        "A URL address not using the HTTPS protocol.",
    ),
    _check(
        "vcsBranch",
        "vcs_branch",
        "A VCS field that does not declare a branch when it should.",
    ),
    _check(
        "versionStyle",
        "version_style",
        "A debian-compatible version not using the proper format.",
    ),
)

CHECKS_BY_NAME: Dict[str, CheckDefinition] = {c.name: c for c in ALL_CHECKS}
_CHECKS_BY_LOWER_NAME: Dict[str, CheckDefinition] = {
    c.name.lower(): c for c in ALL_CHECKS
}


def find_check(name: str) -> CheckDefinition:
    """Look up a check by its identifier (case-insensitive)

    :param name: The check identifier such as "trailingSpace"
    :return: The check definition
    :raises UnknownCheckError: If no such check exists
    """
    try:
        return _CHECKS_BY_LOWER_NAME[name.lower()]
    except KeyError:
        raise UnknownCheckError(f'Unknown check "{name}"') from None


@dataclasses.dataclass(slots=True, frozen=True)
class Configuration:
    """The enabled state of every check plus the file being checked

    A value of True means that the check is enabled, not that the described
    behaviour is allowed. Instances are immutable; use `with_overrides` or
    `for_file` to derive a new configuration.
    """

    address_style: bool = False
    arch_inversion: bool = False
    comments: bool = False
    copyright_file_pattern_generality: bool = False
    copyright_source_style: bool = False
    custom_field_names: bool = False
    custom_fields: bool = False
    custom_license_exception: bool = False
    custom_urgencies: bool = False
    debian_installer_section: bool = False
    description_reserved_syntax: bool = False
    dgit_extra_data: bool = False
    duplicate_architecture: bool = False
    duplicate_field: bool = False
    duplicate_file_pattern: bool = False
    duplicate_files: bool = False
    duplicate_issue_numbers: bool = False
    duplicate_packages: bool = False
    duplicate_vcs: bool = False
    email: bool = False
    empty_fields: bool = False
    empty_stanza_separators: bool = False
    exact_format_version: bool = False
    extra_priority: bool = False
    field_name: bool = False
    field_name_capitalization: bool = False
    field_type: bool = False
    file_list_indent: bool = False
    future_date: bool = False
    leading_empty_line: bool = False
    license_declarations: bool = False
    license_declared_after_explanation: bool = False
    license_name: bool = False
    maintainer_name_full_stop: bool = False
    missing_section_or_priority: bool = False
    multiple_distributions: bool = False
    recommended_fields: bool = False
    redundant_file_pattern: bool = False
    redundant_package_type: bool = False
    source_redundant_version: bool = False
    space_after_colon: bool = False
    strict_arch: bool = False
    strict_copyright_format_version: bool = False
    strict_section: bool = False
    strict_standards_version: bool = False
    trailing_space: bool = False
    unknown_package_type: bool = False
    unknown_priority: bool = False
    upstream_contact_style: bool = False
    upstream_version_style: bool = False
    urgency_description_parentheses: bool = False
    url: bool = False
    url_exists: bool = False
    url_force_https: bool = False
    vcs_branch: bool = False
    version_style: bool = False

    checked_type: ControlType = ControlType.COPYRIGHT
    target_file: Optional[str] = None

    @classmethod
    def from_enabled_checks(cls, check_names: Iterable[str]) -> "Configuration":
        return cls(**{find_check(n).attribute: True for n in check_names})

    @property
    def effective_target_file(self) -> str:
        if self.target_file is None:
            return self.checked_type.default_file
        return self.target_file

    def is_enabled(self, check_name: str) -> bool:
        return find_check(check_name).accessor(self)

    def enabled_checks(self) -> List[str]:
        return [c.name for c in ALL_CHECKS if c.accessor(self)]

    def with_overrides(
        self,
        *,
        enable: Sequence[str] = tuple(),
        disable: Sequence[str] = tuple(),
    ) -> "Configuration":
        """Derive a configuration with some checks toggled

        Names are resolved case-insensitively. Checks listed in `disable` win
        over checks listed in `enable`.
        """
        changes: Dict[str, bool] = {}
        for name in enable:
            changes[find_check(name).attribute] = True
        for name in disable:
            changes[find_check(name).attribute] = False
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def for_file(
        self,
        checked_type: ControlType,
        target_file: Optional[str] = None,
    ) -> "Configuration":
        return dataclasses.replace(
            self,
            checked_type=checked_type,
            target_file=target_file,
        )


@dataclasses.dataclass(slots=True, frozen=True)
class Preset:
    name: str
    description: str
    configuration: Configuration


_NORMAL_CHECKS: FrozenSet[str] = frozenset(
    {
        "emptyFields",
        "comments",
        "debianInstallerSection",
        "extraPriority",
        "missingSectionOrPriority",
        "customUrgencies",
        "copyrightFilePatternGenerality",
        "licenseName",
        "licenseDeclarations",
        "unknownPriority",
        "fieldName",
        "duplicateField",
        "fieldType",
        "archInversion",
        "futureDate",
        "descriptionReservedSyntax",
        "fileListIndent",
        "duplicateVcs",
        "upstreamVersionStyle",
        "url",
        "versionStyle",
        "leadingEmptyLine",
        "email",
        "addressStyle",
    }
)

_STRICT_CHECKS: FrozenSet[str] = _NORMAL_CHECKS | {
    "emptyStanzaSeparators",
    "spaceAfterColon",
    "customFields",
    "recommendedFields",
    "strictArch",
    "duplicateArchitecture",
    "redundantPackageType",
    "dgitExtraData",
    "duplicatePackages",
    "duplicateFiles",
    "urgencyDescriptionParentheses",
    "duplicateIssueNumbers",
    "strictCopyrightFormatVersion",
    "customFieldNames",
    "duplicateFilePattern",
    "strictSection",
}


PRESET_QUIRKS = Preset(
    "quirks",
    "The quirks preset disables all non-essential checks.",
    Configuration(),
)
PRESET_NORMAL = Preset(
    "normal",
    "The normal preset is designed for files following the letter of Debian Policy"
    " (unless ambiguous), but not necessarily following all best practices.",
    Configuration.from_enabled_checks(_NORMAL_CHECKS),
)
PRESET_STRICT = Preset(
    "strict",
    "The strict preset is for files following Debian Policy, including any best"
    " practices or conventions.",
    Configuration.from_enabled_checks(_STRICT_CHECKS),
)
PRESET_EXACT = Preset(
    "exact",
    "The exact preset enables all checks, even ones not mentioned or mandated by the"
    " standards, including unstable checks. Not for production use.",
    Configuration.from_enabled_checks(c.name for c in ALL_CHECKS),
)

# From least strict to the most strict
PRESET_PRECEDENCE: Tuple[Preset, ...] = (
    PRESET_QUIRKS,
    PRESET_NORMAL,
    PRESET_STRICT,
    PRESET_EXACT,
)
DEFAULT_PRESET = PRESET_NORMAL


def find_preset(name: str) -> Preset:
    lowered = name.lower()
    for preset in PRESET_PRECEDENCE:
        if preset.name == lowered:
            return preset
    known = ", ".join(p.name for p in PRESET_PRECEDENCE)
    raise UnknownPresetError(f'Unknown preset "{name}". Known presets are: {known}')


def previous_preset(preset: Preset) -> Optional[Preset]:
    idx = PRESET_PRECEDENCE.index(preset)
    if idx == 0:
        return None
    return PRESET_PRECEDENCE[idx - 1]
