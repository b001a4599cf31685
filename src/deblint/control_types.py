from enum import Enum

from deblint.exceptions import UnknownControlTypeError


class ControlType(Enum):
    SOURCE_PACKAGE_CONTROL = (
        "debian/control",
        "control",
        "source package control file",
        False,
    )
    BINARY_PACKAGE_CONTROL = (
        "DEBIAN/control",
        "control",
        "binary package control file",
        False,
    )
    COPYRIGHT = ("debian/copyright", "copyright", "copyright file", False)
    SOURCE_CONTROL = (".dsc", ".dsc", "source control file", True)
    CHANGES = (".changes", ".changes", "upload control file", True)

    @property
    def type_name(self) -> str:
        return self.value[0]

    @property
    def default_file(self) -> str:
        return self.value[1]

    @property
    def description(self) -> str:
        return self.value[2]

    @property
    def supports_pgp(self) -> bool:
        return self.value[3]

    @property
    def allows_comments(self) -> bool:
        return self is ControlType.SOURCE_PACKAGE_CONTROL

    @classmethod
    def from_type_name(cls, type_name: str) -> "ControlType":
        try:
            return TYPE_NAME2CONTROL_TYPE[type_name]
        except KeyError:
            known = ", ".join(TYPE_NAME2CONTROL_TYPE)
            raise UnknownControlTypeError(
                f'Unknown control file type "{type_name}". Known types are: {known}'
            ) from None


TYPE_NAME2CONTROL_TYPE = {ct.type_name: ct for ct in ControlType}
