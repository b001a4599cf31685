import itertools
from typing import FrozenSet, Tuple

from debian.debian_support import Version

from deblint import COPYRIGHT_FORMAT_SPEC, DEBIAN_POLICY_CONTROL_FIELDS

CURRENT_STANDARDS_VERSION = Version("4.7.0")

POLICY_ARCHITECTURE = f"{DEBIAN_POLICY_CONTROL_FIELDS}#architecture"
POLICY_ARCH_WILDCARDS = "https://www.debian.org/doc/debian-policy/ch-customized-programs.html#s-arch-wildcard-spec"
POLICY_SUBSECTIONS = "https://www.debian.org/doc/debian-policy/ch-archive.html#s-subsections"
POLICY_PRIORITIES = "https://www.debian.org/doc/debian-policy/ch-archive.html#s-priorities"
POLICY_RELATIONSHIPS = "https://www.debian.org/doc/debian-policy/ch-relationships.html"
POLICY_VCS_FIELDS = f"{DEBIAN_POLICY_CONTROL_FIELDS}#s-f-vcs-fields"
POLICY_VERSION = f"{DEBIAN_POLICY_CONTROL_FIELDS}#version"
POLICY_MAINTAINER = f"{DEBIAN_POLICY_CONTROL_FIELDS}#maintainer"
POLICY_FILES = f"{DEBIAN_POLICY_CONTROL_FIELDS}#s-f-files"
POLICY_FORMAT = f"{DEBIAN_POLICY_CONTROL_FIELDS}#format"
POLICY_URGENCY = f"{DEBIAN_POLICY_CONTROL_FIELDS}#urgency"
POLICY_SOURCE = f"{DEBIAN_POLICY_CONTROL_FIELDS}#source"
POLICY_CHECKSUMS = (
    f"{DEBIAN_POLICY_CONTROL_FIELDS}#checksums-sha1-and-checksums-sha256"
)
RFC822_REFERENCE = "https://www.w3.org/Protocols/rfc822/"
COPYRIGHT_FILES_FIELD = f"{COPYRIGHT_FORMAT_SPEC}#files-field"
COPYRIGHT_LICENSE_SHORT_NAME = f"{COPYRIGHT_FORMAT_SPEC}#license-short-name"

# Architecture names as known to dpkg-architecture 1.21.1
_BASE_CPUS: Tuple[str, ...] = (
    "i386",
    "ia64",
    "alpha",
    "amd64",
    "arc",
    "armeb",
    "arm",
    "arm64",
    "avr32",
    "hppa",
    "m32r",
    "m68k",
    "mips",
    "mipsel",
    "mipsr6",
    "mipsr6el",
    "mips64",
    "mips64el",
    "mips64r6",
    "mips64r6el",
    "nios2",
    "or1k",
    "powerpc",
    "powerpcel",
    "ppc64",
    "ppc64el",
    "riscv64",
    "s390",
    "s390x",
    "sh3",
    "sh3eb",
    "sh4",
    "sh4eb",
    "sparc",
    "sparc64",
    "tilegx",
)

# CPUs that only exist as plain (linux) architecture names
_LINUX_ONLY_CPUS: Tuple[str, ...] = (
    "armhf",
    "armel",
    "mipsn32",
    "mipsn32el",
    "mipsn32r6",
    "mipsn32r6el",
    "mips64",
    "mips64el",
    "mips64r6",
    "mips64r6el",
    "powerpcspe",
    "x32",
    "arm64ilp32",
)

_SYSTEMS: Tuple[str, ...] = (
    "kfreebsd",
    "knetbsd",
    "kopensolaris",
    "hurd",
    "darwin",
    "dragonflybsd",
    "freebsd",
    "netbsd",
    "openbsd",
    "aix",
    "solaris",
    "uclinux",
)

_LIBC_LINUX: Tuple[str, ...] = ("uclibc-linux", "musl-linux")

_EXTRA_ARCHITECTURES: Tuple[str, ...] = (
    "uclibc-linux-armel",
    "musl-linux-armhf",
    "kfreebsd-armhf",
    "uclinux-armel",
    "mint-m68k",
)

KNOWN_ARCHITECTURES: FrozenSet[str] = frozenset(
    itertools.chain(
        _BASE_CPUS,
        _LINUX_ONLY_CPUS,
        (
            f"{system}-{cpu}"
            for system, cpu in itertools.product(
                itertools.chain(_SYSTEMS, _LIBC_LINUX), _BASE_CPUS
            )
        ),
        _EXTRA_ARCHITECTURES,
    )
)

KNOWN_SYSTEMS: FrozenSet[str] = frozenset(
    itertools.chain(_SYSTEMS, ("linux", "mint"))
)

KNOWN_CPUS: FrozenSet[str] = frozenset(
    itertools.chain(
        (a.rsplit("-", 1)[1] for a in KNOWN_ARCHITECTURES if "-" in a),
        _LINUX_ONLY_CPUS,
    )
)

KNOWN_AREAS: FrozenSet[str] = frozenset(["contrib", "non-free"])

KNOWN_SECTIONS: FrozenSet[str] = frozenset(
    [
        "admin",
        "cli-mono",
        "comm",
        "database",
        "debian-installer",
        "debug",
        "devel",
        "doc",
        "editors",
        "education",
        "electronics",
        "embedded",
        "fonts",
        "games",
        "gnome",
        "gnu-r",
        "gnustep",
        "graphics",
        "hamradio",
        "haskell",
        "httpd",
        "interpreters",
        "introspection",
        "java",
        "javascript",
        "kde",
        "kernel",
        "libdevel",
        "libs",
        "lisp",
        "localization",
        "mail",
        "math",
        "metapackages",
        "misc",
        "net",
        "news",
        "ocaml",
        "oldlibs",
        "otherosfs",
        "perl",
        "php",
        "python",
        "ruby",
        "rust",
        "science",
        "shells",
        "sound",
        "tasks",
        "tex",
        "text",
        "utils",
        "vcs",
        "video",
        "web",
        "x11",
        "xfce",
        "zope",
    ]
)

KNOWN_PRIORITIES: Tuple[str, ...] = (
    "required",
    "important",
    "standard",
    "optional",
    "extra",
)

KNOWN_PACKAGE_TYPES: Tuple[str, ...] = ("deb", "udeb")

KNOWN_URGENCIES: Tuple[str, ...] = ("low", "medium", "high", "emergency", "critical")

KNOWN_LICENSE_EXCEPTIONS: Tuple[str, ...] = ("Font", "OpenSSL")

KNOWN_DSC_FORMATS: Tuple[str, ...] = ("1.0", "3.0 (native)", "3.0 (quilt)")

CHANGES_FORMAT = "1.8"

VCS_FIELDS: Tuple[str, ...] = (
    "Vcs-Arch",
    "Vcs-Bzr",
    "Vcs-Cvs",
    "Vcs-Darcs",
    "Vcs-Git",
    "Vcs-Hg",
    "Vcs-Mtn",
    "Vcs-Svn",
)

CHECKSUM_FIELDS: Tuple[str, ...] = ("Checksums-Sha1", "Checksums-Sha256")

URL_SCHEMES: FrozenSet[str] = frozenset(["http", "https", "ftp", "file", "mailto"])
URL_SCHEMES_WITH_HOST: FrozenSet[str] = frozenset(["http", "https", "ftp"])
