from .version import IS_RELEASE_BUILD, __version__

DEBIAN_POLICY_CONTROL_FIELDS = "https://www.debian.org/doc/debian-policy/ch-controlfields.html"
COPYRIGHT_FORMAT_SPEC = "https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/"
