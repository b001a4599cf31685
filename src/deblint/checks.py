import email.utils
import re
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, TypeVar, TYPE_CHECKING

from debian.debian_support import Version

from deblint import COPYRIGHT_FORMAT_SPEC, DEBIAN_POLICY_CONTROL_FIELDS
from deblint.address_validation import is_valid_mailbox
from deblint.control_types import ControlType
from deblint.parsing import Stanza
from deblint.reference_data import (
    CHANGES_FORMAT,
    CHECKSUM_FIELDS,
    COPYRIGHT_FILES_FIELD,
    COPYRIGHT_LICENSE_SHORT_NAME,
    CURRENT_STANDARDS_VERSION,
    KNOWN_ARCHITECTURES,
    KNOWN_AREAS,
    KNOWN_CPUS,
    KNOWN_DSC_FORMATS,
    KNOWN_LICENSE_EXCEPTIONS,
    KNOWN_PACKAGE_TYPES,
    KNOWN_PRIORITIES,
    KNOWN_SECTIONS,
    KNOWN_SYSTEMS,
    KNOWN_URGENCIES,
    POLICY_ARCH_WILDCARDS,
    POLICY_ARCHITECTURE,
    POLICY_CHECKSUMS,
    POLICY_FILES,
    POLICY_FORMAT,
    POLICY_MAINTAINER,
    POLICY_PRIORITIES,
    POLICY_RELATIONSHIPS,
    POLICY_SOURCE,
    POLICY_SUBSECTIONS,
    POLICY_URGENCY,
    POLICY_VCS_FIELDS,
    POLICY_VERSION,
    RFC822_REFERENCE,
    VCS_FIELDS,
)
from deblint.stanza_spec import (
    FieldCheck,
    StanzaCheck,
    noop_field_check,
    noop_stanza_check,
)
from deblint.url_checks import check_url, is_valid_url

if TYPE_CHECKING:
    from deblint.control_file import ControlFile
    from deblint.linting.lint_util import LintState


FileCheck = Callable[["ControlFile", "LintState"], None]
C = TypeVar("C", bound=Callable)

FIELD_CHECKS: Dict[str, FieldCheck] = {"noop": noop_field_check}
STANZA_CHECKS: Dict[str, StanzaCheck] = {"noop": noop_stanza_check}
FILE_CHECKS: Dict[str, FileCheck] = {}

_RE_ARCH_NAME = re.compile(r"[a-zA-Z0-9\-]+")
_RE_SHA1 = re.compile(r"[a-fA-F0-9]{40}")
_RE_SHA256 = re.compile(r"[a-fA-F0-9]{64}")
_RE_MD5 = re.compile(r"[a-fA-F0-9]{32}")
_RE_GIT_HASH = re.compile(r"[a-f0-9]{40}")
_RE_INTEGER = re.compile(r"[+-]?[0-9]+")
_RE_ILLEGAL_ESCAPE = re.compile(r".*\\[^\\*?].*")
_RE_WHITESPACE = re.compile(r"\s")
_RE_DATE = re.compile(
    r"(Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d\d? "
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{4} \d{2}:\d{2}:\d{2} [+-]\d{4}"
)
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_RE_LICENSE_JOIN = re.compile(r" (?:or|and) ")
_RE_PACKAGE_NAME = re.compile(r"[a-z0-9][a-z0-9+.\-]+")
_RE_RRR_KEYWORD = re.compile(r"[!-.0-~]{2,}/[!-.0-~/]{2,}")
_RE_STANDARDS_VERSION_PART = re.compile(r"[0-9]+")
_RE_UPSTREAM_VERSION = re.compile(r"[0-9][A-Za-z0-9.+~\-]*")
_RE_DEBIAN_REVISION = re.compile(r"[A-Za-z0-9.+~]+")
_RE_EPOCH = re.compile(r"[0-9]+")
_RE_CHANGES_FORMAT = re.compile(r"\d+\.\d+")
_RE_DSC_FORMAT = re.compile(r"\d+\.\d+( \([a-zA-Z0-9]+\))?")
_RE_FILE_LIST_INDENT = re.compile(r" \w")
_RE_DEPENDENCY_SEPARATOR = re.compile(r"[|,]")
_RE_DEPENDENCY_NAME_END = re.compile(r"[(\[<\s]")
_RE_SUBSTVAR = re.compile(r"\$\{[^}]+\}")

# Longest operators first, so "<=" is never read as "=" with garbage
_VERSION_OPERATORS = ("<<", "<=", ">=", ">>", "=")
_NON_EXACT_OPERATORS = ("<<", "<=", ">=", ">>")

_KNOWN_COPYRIGHT_FORMATS = (
    COPYRIGHT_FORMAT_SPEC,
    COPYRIGHT_FORMAT_SPEC.replace("https://", "http://", 1),
)


def field_check(name: str) -> Callable[[C], C]:
    def _wrapper(func: C) -> C:
        if name in FIELD_CHECKS:
            raise AssertionError(f"There is already a field check named {name}")
        FIELD_CHECKS[name] = func
        return func

    return _wrapper


def stanza_check(name: str) -> Callable[[C], C]:
    def _wrapper(func: C) -> C:
        if name in STANZA_CHECKS:
            raise AssertionError(f"There is already a stanza check named {name}")
        STANZA_CHECKS[name] = func
        return func

    return _wrapper


def file_check(name: str) -> Callable[[C], C]:
    def _wrapper(func: C) -> C:
        if name in FILE_CHECKS:
            raise AssertionError(f"There is already a file check named {name}")
        FILE_CHECKS[name] = func
        return func

    return _wrapper


@file_check("noop")
def noop_file_check(_control_file: "ControlFile", _lint_state: "LintState") -> None:
    pass


def _composite_stanza_check(name: str, *parts: str) -> StanzaCheck:
    checks = [STANZA_CHECKS[p] for p in parts]

    def _check(stanza: Stanza, lint_state: "LintState") -> None:
        for check in checks:
            check(stanza, lint_state)

    _check.__name__ = f"check_{name.replace('-', '_')}_stanza"
    return stanza_check(name)(_check)


def _non_empty_stripped_lines(value: str) -> Iterable[str]:
    for line in value.split("\n"):
        line = line.strip()
        if line:
            yield line


def _first_line_is_empty(value: str) -> bool:
    return value.split("\n", 1)[0].strip() == ""


# Field checks


@field_check("architecture")
def check_architecture(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    declared = value.split()
    if "!" in value:
        if config.arch_inversion and any(not a.startswith("!") for a in declared):
            lint_state.report(
                "Architecture names must all be prepended with exclamation marks,"
                f" or not at all: {value}",
                "archInversion",
                POLICY_ARCHITECTURE,
            )
        declared = [a.replace("!", "") for a in declared]
    for arch in declared:
        if arch == "any":
            continue
        if not config.strict_arch:
            if not _RE_ARCH_NAME.fullmatch(arch):
                lint_state.report(f"Invalid architecture: {arch}")
            continue
        if arch.endswith("-any"):
            if arch[: -len("-any")] not in KNOWN_SYSTEMS:
                lint_state.report(
                    f"Wildcard does not match any architecture: {arch}",
                    "strictArch",
                    POLICY_ARCH_WILDCARDS,
                )
        elif arch.startswith("any-"):
            if arch[len("any-") :] not in KNOWN_CPUS:
                lint_state.report(
                    f"Wildcard does not match any architecture: {arch}",
                    "strictArch",
                    POLICY_ARCH_WILDCARDS,
                )
        elif arch not in KNOWN_ARCHITECTURES:
            lint_state.report(f"Unknown architecture: {arch}", "strictArch")


@field_check("single-architecture")
def check_single_architecture(value: str, lint_state: "LintState") -> None:
    """Check the Architecture field of a stanza

    The rules for `all` and `any` depend on the type of the file.
    """
    arches = value.split()
    if lint_state.config.duplicate_architecture and len(arches) != len(set(arches)):
        lint_state.report(
            f"Duplicated architecture: {value}",
            "duplicateArchitecture",
        )
    checked_type = lint_state.checked_type
    if checked_type == ControlType.SOURCE_PACKAGE_CONTROL:
        if value in ("all", "any"):
            return
        if "all" in arches or "any" in arches:
            lint_state.report(
                f"'all' or 'any' must be the only entries, if present: {value}",
                reference=POLICY_ARCHITECTURE,
            )
            return
        remaining = arches
    elif checked_type == ControlType.SOURCE_CONTROL:
        if "any" in arches:
            if any(a not in ("any", "all") for a in arches):
                lint_state.report(
                    "When 'any' is present in a list, the only other value allowed"
                    f" is 'all': {value}",
                    reference=POLICY_ARCHITECTURE,
                )
            return
        remaining = [a for a in arches if a != "all"]
    elif checked_type == ControlType.CHANGES:
        remaining = [a for a in dict.fromkeys(arches) if a not in ("source", "all")]
        if any(a == "any" or a.startswith("any-") or a.endswith("-any") for a in remaining):
            lint_state.report(
                f"Architecture wildcards are not allowed in .changes files: {value}",
                reference=POLICY_ARCHITECTURE,
            )
            return
    else:
        remaining = [a for a in arches if a != "all"]
    if remaining:
        check_architecture(" ".join(remaining), lint_state)


def _check_checksum_list(value: str, lint_state: "LintState", hash_re: re.Pattern) -> None:
    if lint_state.config.leading_empty_line and not _first_line_is_empty(value):
        lint_state.report(
            "The first line of checksums should be empty",
            "leadingEmptyLine",
            POLICY_CHECKSUMS,
        )
    for line in _non_empty_stripped_lines(value):
        parts = line.split(" ", 2)
        if len(parts) < 3:
            lint_state.report(f"Missing parameter; 3 values required: {line}")
            continue
        if not hash_re.fullmatch(parts[0]):
            lint_state.report(f"Invalid SHA hash: {parts[0]}")
        check_size(parts[1], lint_state)


@field_check("sha1")
def check_sha1(value: str, lint_state: "LintState") -> None:
    _check_checksum_list(value, lint_state, _RE_SHA1)


@field_check("sha256")
def check_sha256(value: str, lint_state: "LintState") -> None:
    _check_checksum_list(value, lint_state, _RE_SHA256)


@field_check("md5")
def check_md5(value: str, lint_state: "LintState") -> None:
    if not _RE_MD5.fullmatch(value):
        lint_state.report(f"Invalid MD5 hash: {value}")


@field_check("size")
def check_size(value: str, lint_state: "LintState") -> None:
    if not _RE_INTEGER.fullmatch(value):
        lint_state.report(f"Invalid size: {value}")
    elif int(value) < 0:
        lint_state.report(f"Size cannot be negative: {value}")
    elif value.startswith("+"):
        lint_state.report(f"Size must be unsigned: {value}")


@field_check("binary-list")
def check_binary_list(value: str, lint_state: "LintState") -> None:
    checked_type = lint_state.checked_type
    if checked_type == ControlType.SOURCE_CONTROL:
        names = value.split(",")
    elif checked_type == ControlType.CHANGES:
        names = value.split(" ")
    else:
        return
    seen = set()
    for name in names:
        name = name.strip()
        if not name:
            lint_state.report(f"Empty file name: {value}")
        elif lint_state.config.duplicate_files and name in seen:
            lint_state.report(f"Duplicated file in list: {name}", "duplicateFiles")
        else:
            seen.add(name)


@field_check("boolean")
def check_boolean(value: str, lint_state: "LintState") -> None:
    if value not in ("yes", "no"):
        lint_state.report(
            f"Invalid boolean value; should be 'yes' or 'no': {value}",
            reference=f"{DEBIAN_POLICY_CONTROL_FIELDS}#essential",
        )


@field_check("change-list")
def check_change_list(value: str, lint_state: "LintState") -> None:
    if lint_state.config.leading_empty_line and not _first_line_is_empty(value):
        lint_state.report(
            "The first line of changes should be empty",
            "leadingEmptyLine",
            f"{DEBIAN_POLICY_CONTROL_FIELDS}#changes",
        )


@field_check("copyright-file-list")
def check_copyright_file_list(value: str, lint_state: "LintState") -> None:
    for pattern in value.split("\n"):
        pattern = pattern.strip()
        if _RE_ILLEGAL_ESCAPE.fullmatch(pattern):
            lint_state.report(
                f"Illegal escape sequence: {pattern}",
                reference=COPYRIGHT_FILES_FIELD,
            )
        if _RE_WHITESPACE.search(pattern):
            lint_state.report(
                f"Illegal whitespace in pattern: {pattern}",
                reference=COPYRIGHT_FILES_FIELD,
            )


def _parse_date(value: str) -> Optional[datetime]:
    offset = value[-4:]
    if int(offset[:2]) > 18 or int(offset[2:]) > 59:
        return None
    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (ValueError, TypeError):
        return None
    if _WEEKDAYS[parsed.weekday()] != value[:3]:
        return None
    return parsed


@field_check("date")
def check_date(value: str, lint_state: "LintState") -> None:
    """Check an RFC 2822 date, such as `Wed, 11 Apr 2001 20:18:20 +0100`"""
    reference = f"{DEBIAN_POLICY_CONTROL_FIELDS}#date"
    if not _RE_DATE.fullmatch(value):
        lint_state.report(f"Invalid date: {value}", reference=reference)
        return
    parsed = _parse_date(value)
    if parsed is None:
        lint_state.report(f"Invalid date: {value}", reference=reference)
    elif lint_state.config.future_date and parsed > datetime.now(timezone.utc):
        lint_state.report(f"Future date specified: {value}", "futureDate")


@field_check("description")
def check_description(value: str, lint_state: "LintState") -> None:
    reference = f"{DEBIAN_POLICY_CONTROL_FIELDS}#description"
    lines = value.split("\n")
    if not lines[0].strip():
        lint_state.report("Missing synopsis", reference=reference)
    if not lint_state.config.description_reserved_syntax:
        return
    for line in lines[1:]:
        if line.startswith(" .") and line != " .":
            lint_state.report(
                f"Use of reserved syntax: {line}",
                "descriptionReservedSyntax",
                reference,
            )


@field_check("dgit")
def check_dgit(value: str, lint_state: "LintState") -> None:
    parts = value.split(" ")
    if lint_state.config.dgit_extra_data and len(parts) > 1:
        lint_state.report(
            "Extra data after the commit hash is reserved for future expansion;"
            f" do not use: {value}",
            "dgitExtraData",
            f"{DEBIAN_POLICY_CONTROL_FIELDS}#dgit",
        )
    if not _RE_GIT_HASH.fullmatch(parts[0]):
        lint_state.report(f"Invalid git hash: {parts[0]}")


@field_check("distribution")
def check_distribution(value: str, lint_state: "LintState") -> None:
    if lint_state.config.multiple_distributions and " " in value:
        lint_state.report(
            f"Please only use a single distribution: {value}",
            "multipleDistributions",
            f"{DEBIAN_POLICY_CONTROL_FIELDS}#s-f-distribution",
        )


@field_check("license")
def check_license(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    lines = value.split("\n")
    short_names = lines[0].strip()
    if not short_names:
        lint_state.report(
            "License must have a short name in the first line",
            reference=f"{COPYRIGHT_FORMAT_SPEC}#license-field",
        )
        return
    if not config.license_name:
        return
    for name in _RE_LICENSE_JOIN.split(short_names.replace(",", "")):
        if " " in name:
            name_parts = name.split(" ")
            if len(name_parts) != 4:
                lint_state.report(
                    f"Invalid license exception: {name}",
                    "licenseName",
                    COPYRIGHT_LICENSE_SHORT_NAME,
                )
                continue
            if name_parts[1] != "with" or name_parts[3] != "exception":
                lint_state.report(
                    f"Invalid license exception: {name}",
                    "licenseName",
                    COPYRIGHT_LICENSE_SHORT_NAME,
                )
            if (
                config.custom_license_exception
                and name_parts[2] not in KNOWN_LICENSE_EXCEPTIONS
            ):
                lint_state.report(
                    f"Unknown license exception: {name_parts[2]}",
                    "customLicenseException",
                )
        elif name == "public-domain" and len(lines) == 1:
            lint_state.report(
                "Licensing to public domain must be followed by an explanation",
                "licenseName",
                COPYRIGHT_LICENSE_SHORT_NAME,
            )


@field_check("number-list")
def check_number_list(value: str, lint_state: "LintState") -> None:
    seen = set()
    for part in value.split(" "):
        if not _RE_INTEGER.fullmatch(part):
            lint_state.report(f"Invalid number: {part}")
            continue
        number = int(part)
        if part.startswith("+"):
            lint_state.report(f"Numbers should be unsigned: {part}")
        elif number <= 0:
            lint_state.report(f"Numbers should not be negative: {part}")
        elif lint_state.config.duplicate_issue_numbers and number in seen:
            lint_state.report(f"Duplicate number: {part}", "duplicateIssueNumbers")
        else:
            seen.add(number)


@field_check("package-name")
def check_package_name(value: str, lint_state: "LintState") -> None:
    if not _RE_PACKAGE_NAME.fullmatch(value):
        lint_state.report(f"Invalid package name: {value}")


@field_check("package-type")
def check_package_type(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    if config.unknown_package_type and value not in KNOWN_PACKAGE_TYPES:
        lint_state.report(f"Unknown package type: {value}", "unknownPackageType")
    if (
        config.redundant_package_type
        and value == "deb"
        and lint_state.checked_type == ControlType.SOURCE_PACKAGE_CONTROL
    ):
        lint_state.report(
            f"Package-Type should be omitted when using the default value: {value}",
            "redundantPackageType",
            f"{DEBIAN_POLICY_CONTROL_FIELDS}#package-type",
        )


@field_check("priority")
def check_priority(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    if config.unknown_priority and value not in KNOWN_PRIORITIES:
        lint_state.report(
            f"Unknown priority: {value}",
            "unknownPriority",
            POLICY_PRIORITIES,
        )
    if config.extra_priority and value == "extra":
        lint_state.report(
            "The 'extra' priority is deprecated, use 'optional' instead",
            "extraPriority",
            POLICY_PRIORITIES,
        )


@field_check("rules-requires-root")
def check_rules_requires_root(value: str, lint_state: "LintState") -> None:
    if value in ("no", "binary-targets"):
        return
    for keyword in value.split(" "):
        if not _RE_RRR_KEYWORD.fullmatch(keyword):
            lint_state.report(
                f"Invalid keyword for Rules-Requires-Root: {keyword}",
                reference=f"{DEBIAN_POLICY_CONTROL_FIELDS}#s-f-rules-requires-root",
            )


@field_check("rfc822")
def check_rfc822(value: str, lint_state: "LintState") -> None:
    if lint_state.config.email and not is_valid_mailbox(value):
        lint_state.report(
            f"Invalid email address: {value}",
            "email",
            RFC822_REFERENCE,
        )


@field_check("address")
def check_address(value: str, lint_state: "LintState") -> None:
    """Check a `Full Name <mailbox>` address"""
    config = lint_state.config
    begin = value.find("<")
    end = value.rfind(">")
    if begin == -1 or end == -1 or end < begin:
        if config.address_style:
            lint_state.report(
                f"Missing email address: {value}",
                "addressStyle",
                POLICY_MAINTAINER,
            )
        name = value if begin == -1 else value[:begin]
    else:
        check_rfc822(value[begin + 1 : end], lint_state)
        if config.address_style and end != len(value) - 1:
            lint_state.report(
                f"Extra content after email address: {value}",
                "addressStyle",
                POLICY_MAINTAINER,
            )
        name = value[:begin]
    if config.maintainer_name_full_stop and "." in name:
        lint_state.report(
            f"Name contains full stop: {name.strip()}",
            "maintainerNameFullStop",
            POLICY_MAINTAINER,
        )
    if config.address_style and begin != -1 and not name.strip():
        lint_state.report(f"Missing name: {value}", "addressStyle", POLICY_MAINTAINER)


@field_check("multi-address")
def check_multi_address(value: str, lint_state: "LintState") -> None:
    for address in value.split(","):
        check_address(address.strip(), lint_state)


@field_check("upstream-contact")
def check_upstream_contact(value: str, lint_state: "LintState") -> None:
    if not lint_state.config.upstream_contact_style:
        return
    if is_valid_url(value):
        check_url(value, lint_state)
    else:
        check_address(value, lint_state)


@field_check("section")
def check_section(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    if "/" in value:
        area, section = value.split("/", 1)
        if config.strict_section and area not in KNOWN_AREAS:
            lint_state.report(f"Unknown area: {value}", "strictSection", POLICY_SUBSECTIONS)
    else:
        section = value
    if config.strict_section and section not in KNOWN_SECTIONS:
        lint_state.report(f"Unknown section: {value}", "strictSection", POLICY_SUBSECTIONS)
    if config.debian_installer_section and section == "debian-installer":
        lint_state.report(
            f"debian-installer section should not be used here: {value}",
            "debianInstallerSection",
            POLICY_SUBSECTIONS,
        )


@field_check("package-list")
def check_package_list(value: str, lint_state: "LintState") -> None:
    reference = f"{DEBIAN_POLICY_CONTROL_FIELDS}#s-f-package-list"
    config = lint_state.config
    lines = value.split("\n")
    if config.leading_empty_line and lines[0].strip():
        lint_state.report(
            f"Package-List must begin with an empty line: {value}",
            "leadingEmptyLine",
            reference,
        )
    seen = set()
    for line in lines[1:]:
        parts = line.strip().split(" ")
        if len(parts) < 4:
            lint_state.report(
                f"Missing values from package; 4 values are required: {line.strip()}",
                reference=reference,
            )
            continue
        name, package_type, section, priority = parts[:4]
        check_package_name(name, lint_state)
        check_package_type(package_type, lint_state)
        check_section(section, lint_state)
        check_priority(priority, lint_state)
        if config.duplicate_packages and name in seen:
            lint_state.report(f"Duplicate package in list: {name}", "duplicatePackages")
        else:
            seen.add(name)


def _check_changes_section_and_priority(
    section: str,
    priority: str,
    file_name: str,
    line: str,
    lint_state: "LintState",
) -> None:
    config = lint_state.config
    if section == "-":
        if config.missing_section_or_priority:
            lint_state.report(
                f"Section must be defined: {file_name}",
                "missingSectionOrPriority",
                POLICY_FILES,
            )
    elif section == "byhand":
        if priority != "-":
            lint_state.report(
                f"Priority must be '-' if section is 'byhand': {line}",
                reference=POLICY_FILES,
            )
    else:
        check_section(section, lint_state)
        if priority != "-":
            check_priority(priority, lint_state)
        elif config.missing_section_or_priority:
            lint_state.report(
                f"Priority must be defined: {file_name}",
                "missingSectionOrPriority",
                POLICY_FILES,
            )


@field_check("file-list")
def check_file_list(value: str, lint_state: "LintState") -> None:
    """Check the Files field of a .dsc or .changes file

    Entries are `md5 size name` in .dsc files and
    `md5 size section priority name` in .changes files.
    """
    config = lint_state.config
    checked_type = lint_state.checked_type
    lines = value.split("\n")
    if config.leading_empty_line and lines[0].strip():
        lint_state.report(
            f"The first line of 'Files' should be empty: {value}",
            "leadingEmptyLine",
            POLICY_FILES,
        )
    if config.file_list_indent:
        for line in lines[1:]:
            if not _RE_FILE_LIST_INDENT.match(line):
                lint_state.report(
                    f"Lines should be indented with only one space: {line}",
                    "fileListIndent",
                    POLICY_FILES,
                )
    if checked_type == ControlType.SOURCE_CONTROL:
        expected_parts = 3
    elif checked_type == ControlType.CHANGES:
        expected_parts = 5
    else:
        return
    seen = set()
    for line in lines[1:]:
        parts = line.strip().split(" ", expected_parts - 1)
        if len(parts) < expected_parts:
            lint_state.report(
                f"Missing parameter: {expected_parts} values required: {line}",
                reference=POLICY_FILES,
            )
            continue
        check_md5(parts[0], lint_state)
        check_size(parts[1], lint_state)
        file_name = parts[-1]
        if checked_type == ControlType.CHANGES:
            _check_changes_section_and_priority(
                parts[2], parts[3], file_name, line, lint_state
            )
        if config.duplicate_files and file_name in seen:
            lint_state.report(f"Duplicated file in list: {file_name}", "duplicateFiles")
        else:
            seen.add(file_name)


@field_check("standards-version")
def check_standards_version(value: str, lint_state: "LintState") -> None:
    parts = value.split(".")
    if not 3 <= len(parts) <= 4 or not all(
        _RE_STANDARDS_VERSION_PART.fullmatch(p) for p in parts
    ):
        lint_state.report(
            f"Invalid standards version: {value}",
            reference=f"{DEBIAN_POLICY_CONTROL_FIELDS}#standards-version",
        )
        return
    if (
        lint_state.config.strict_standards_version
        and Version(value) > CURRENT_STANDARDS_VERSION
    ):
        lint_state.report(
            f"Invalid standards version: {value}",
            "strictStandardsVersion",
            f"{DEBIAN_POLICY_CONTROL_FIELDS}#standards-version",
        )


@field_check("upstream-version")
def check_upstream_version(value: str, lint_state: "LintState") -> None:
    if lint_state.config.upstream_version_style and not _RE_UPSTREAM_VERSION.fullmatch(
        value
    ):
        lint_state.report(
            f"Upstream version uses an invalid format: {value}",
            "upstreamVersionStyle",
            POLICY_VERSION,
        )


@field_check("format-version")
def check_format_version(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    checked_type = lint_state.checked_type
    if checked_type == ControlType.CHANGES:
        if not _RE_CHANGES_FORMAT.fullmatch(value):
            lint_state.report(f"Invalid format version: {value}", reference=POLICY_FORMAT)
        if config.exact_format_version and value != CHANGES_FORMAT:
            lint_state.report(
                f"Please use format version {CHANGES_FORMAT}: {value}",
                "exactFormatVersion",
                POLICY_FORMAT,
            )
    elif checked_type == ControlType.SOURCE_CONTROL:
        if not _RE_DSC_FORMAT.fullmatch(value):
            lint_state.report(f"Invalid format version: {value}", reference=POLICY_FORMAT)
        if config.exact_format_version and value not in KNOWN_DSC_FORMATS:
            lint_state.report(
                f"Unsupported format version: {value}",
                "exactFormatVersion",
                POLICY_FORMAT,
            )


@field_check("urgency")
def check_urgency(value: str, lint_state: "LintState") -> None:
    config = lint_state.config
    level, _, commentary = value.partition(" ")
    if config.custom_urgencies and level.lower() not in KNOWN_URGENCIES:
        lint_state.report(
            f"Unknown urgency level: {level}",
            "customUrgencies",
            POLICY_URGENCY,
        )
    if (
        commentary
        and config.urgency_description_parentheses
        and not (commentary.startswith("(") and commentary.endswith(")"))
    ):
        lint_state.report(
            f"Urgency commentary should be wrapped in parentheses: {value}",
            "urgencyDescriptionParentheses",
            POLICY_URGENCY,
        )


@field_check("url")
def check_url_field(value: str, lint_state: "LintState") -> None:
    if not is_valid_url(value):
        if lint_state.config.url:
            lint_state.report(f"Invalid URL: {value}", "url")
        return
    check_url(value, lint_state)


@field_check("git-vcs")
def check_git_vcs(value: str, lint_state: "LintState") -> None:
    """Check a `url [-b branch] [path]` Vcs-Git value"""
    url, sep, rest = value.partition(" ")
    check_url_field(url, lint_state)
    if not sep:
        if lint_state.config.vcs_branch:
            lint_state.report(
                f"Missing branch definition for Git: {value}",
                "vcsBranch",
                POLICY_VCS_FIELDS,
            )
        return
    if rest.startswith("-b"):
        params = rest.split(" ", 2)
        if len(params) < 2:
            lint_state.report(
                f"Incomplete branch definition for Git: {value}",
                reference=POLICY_VCS_FIELDS,
            )
            return
        if not params[1]:
            lint_state.report(f"Empty branch name: {value}", reference=POLICY_VCS_FIELDS)
        if len(params) == 3:
            path = params[2].strip()
            if not (path.startswith("[") and path.endswith("]")):
                lint_state.report(
                    f"Invalid path definition for Git: {value}",
                    reference=POLICY_VCS_FIELDS,
                )
    elif rest.startswith("["):
        if not rest.endswith("]"):
            lint_state.report(
                f"Invalid path definition for Git: {value}",
                reference=POLICY_VCS_FIELDS,
            )
    else:
        lint_state.report(f"Invalid git data: {value}", reference=POLICY_VCS_FIELDS)


@field_check("hg-vcs")
def check_hg_vcs(value: str, lint_state: "LintState") -> None:
    url, sep, rest = value.partition(" ")
    check_url_field(url, lint_state)
    if not sep:
        if lint_state.config.vcs_branch:
            lint_state.report(
                f"Missing branch definition for Mercurial: {value}",
                "vcsBranch",
                POLICY_VCS_FIELDS,
            )
        return
    if rest.startswith("-b") and len(rest.split(" ")) != 2:
        lint_state.report(
            f"Incomplete branch definition for Mercurial: {value}",
            reference=POLICY_VCS_FIELDS,
        )


@field_check("copyright-format")
def check_copyright_format(value: str, lint_state: "LintState") -> None:
    check_url_field(value, lint_state)
    if (
        lint_state.config.strict_copyright_format_version
        and value not in _KNOWN_COPYRIGHT_FORMATS
    ):
        lint_state.report(
            f"Unknown copyright format: {value}",
            "strictCopyrightFormatVersion",
            f"{COPYRIGHT_FORMAT_SPEC}#format-field",
        )


@field_check("copyright-source")
def check_copyright_source(value: str, lint_state: "LintState") -> None:
    if not lint_state.config.copyright_source_style:
        return
    if is_valid_url(value):
        check_url(value, lint_state)
    else:
        lint_state.report(
            f"Invalid copyright source URL: {value}",
            "copyrightSourceStyle",
            f"{COPYRIGHT_FORMAT_SPEC}#source-field",
        )


@field_check("version")
def check_version(value: str, lint_state: "LintState") -> None:
    """Check a `[epoch:]upstream_version[-debian_revision]` version"""
    epoch, colon, remaining = value.partition(":")
    if not colon:
        epoch, remaining = "0", value
    upstream_version, dash, debian_revision = remaining.rpartition("-")
    if not dash:
        upstream_version, debian_revision = remaining, "0"
    if epoch.startswith(("+", "-")):
        lint_state.report(f"Epoch must not have a sign: {value}", reference=POLICY_VERSION)
    elif not _RE_EPOCH.fullmatch(epoch):
        lint_state.report(
            f"Epoch must be an unsigned integer: {value}",
            reference=POLICY_VERSION,
        )
    check_upstream_version(upstream_version, lint_state)
    if lint_state.config.version_style and not _RE_DEBIAN_REVISION.fullmatch(
        debian_revision
    ):
        lint_state.report(
            f"Debian version uses an invalid format: {debian_revision}",
            "versionStyle",
            POLICY_VERSION,
        )


def _check_relation(relation: str, value: str, lint_state: "LintState") -> None:
    name = _RE_DEPENDENCY_NAME_END.split(relation, 1)[0].strip()
    if not _RE_SUBSTVAR.fullmatch(name):
        # Drop the multi-arch qualifier, as in "python3:any"
        check_package_name(name.split(":", 1)[0], lint_state)

    begin = relation.find("(")
    end = relation.rfind(")")
    if begin != -1 and end != -1 and begin < end:
        version = relation[begin + 1 : end].strip()
        if not version:
            lint_state.report(
                f"Empty package version string: {value}",
                reference=POLICY_RELATIONSHIPS,
            )
        else:
            for operator in _VERSION_OPERATORS:
                if version.startswith(operator):
                    check_version(version[len(operator) :].strip(), lint_state)
                    break
            else:
                lint_state.report(
                    f"Invalid relation for package version: {version}",
                    reference=POLICY_RELATIONSHIPS,
                )
    elif begin != end:
        lint_state.report(
            f"Incomplete package version string: {value}",
            reference=POLICY_RELATIONSHIPS,
        )

    begin = relation.find("[")
    end = relation.rfind("]")
    if begin != -1 and end != -1 and begin < end:
        arches = relation[begin + 1 : end].strip()
        if arches:
            check_architecture(arches, lint_state)
    elif begin != end:
        lint_state.report(
            f"Incomplete architecture specification string: {value}",
            reference=POLICY_RELATIONSHIPS,
        )


@field_check("dependency")
def check_dependency(value: str, lint_state: "LintState") -> None:
    for relation in _RE_DEPENDENCY_SEPARATOR.split(value):
        relation = relation.strip()
        if relation:
            _check_relation(relation, value, lint_state)


@field_check("exact-dependency")
def check_exact_dependency(value: str, lint_state: "LintState") -> None:
    if any(op in value for op in _NON_EXACT_OPERATORS):
        lint_state.report(f"Only exact package versions can be provided: {value}")
    check_dependency(value, lint_state)


@field_check("source")
def check_source(value: str, lint_state: "LintState") -> None:
    """Check a `name [(version)]` source reference"""
    name, paren, rest = value.partition("(")
    check_package_name(name.rstrip(), lint_state)
    if not paren:
        return
    if lint_state.checked_type in (
        ControlType.SOURCE_PACKAGE_CONTROL,
        ControlType.SOURCE_CONTROL,
    ):
        lint_state.report(
            f"debian/control and .dsc files cannot have a version in their source: {value}",
            reference=POLICY_SOURCE,
        )
    version = rest.strip()
    if version.endswith(")"):
        version = version[:-1].strip()
    check_version(version, lint_state)


# Stanza checks


def _file_names(value: str) -> List[str]:
    return [line.split(" ")[-1] for line in _non_empty_stripped_lines(value)]


@stanza_check("checksum")
def check_checksum_stanza(stanza: Stanza, lint_state: "LintState") -> None:
    files_field = stanza.get_field("Files")
    if files_field is None:
        return
    files = _file_names(files_field.data)
    for field_name in CHECKSUM_FIELDS:
        field = stanza.get_field(field_name)
        if field is None:
            continue
        remaining = set(files)
        for file_name in _file_names(field.data):
            if file_name not in remaining:
                lint_state.report(
                    "Checksummed file is not in file list, or is already checksummed:"
                    f" {file_name}",
                    reference=POLICY_CHECKSUMS,
                    line=field.line_number,
                )
            remaining.discard(file_name)
        if remaining:
            lint_state.report(
                f"File is not in checksum list: {', '.join(sorted(remaining))}",
                line=field.line_number,
            )


@stanza_check("source")
def check_source_stanza(stanza: Stanza, lint_state: "LintState") -> None:
    if not lint_state.config.source_redundant_version:
        return
    source = stanza.get_field("Source")
    version = stanza.get_field("Version")
    if source is None or version is None:
        return
    _, paren, rest = source.data.partition("(")
    if not paren or ")" not in rest:
        return
    if rest.split(")", 1)[0] == version.data:
        lint_state.report(
            "Please omit the source version when the Version field is used with"
            f" the same value: {source.data}",
            "sourceRedundantVersion",
            POLICY_SOURCE,
            line=source.line_number,
        )


@stanza_check("vcs")
def check_vcs_stanza(stanza: Stanza, lint_state: "LintState") -> None:
    if not lint_state.config.duplicate_vcs:
        return
    found = False
    for field_name in VCS_FIELDS:
        field = stanza.get_field(field_name)
        if field is None:
            continue
        if found:
            lint_state.report(
                f"Multiple VCS fields are declared: {field_name}",
                "duplicateVcs",
                POLICY_VCS_FIELDS,
                line=field.line_number,
            )
        found = True


@stanza_check("copyright-header")
def check_copyright_header_stanza(stanza: Stanza, lint_state: "LintState") -> None:
    if "Copyright" in stanza and "License" not in stanza:
        lint_state.report(
            "A Copyright field alone is not sufficient; please include a License"
            " field as well when an explanation is needed: Copyright",
            reference=f"{COPYRIGHT_FORMAT_SPEC}#header-stanza",
        )


_composite_stanza_check("source-and-vcs", "vcs", "source")
_composite_stanza_check("source-and-checksum", "source", "checksum")
_composite_stanza_check("source-control", "vcs", "source", "checksum")
