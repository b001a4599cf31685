import dataclasses

import pytest

from deblint.configuration import (
    ALL_CHECKS,
    DEFAULT_PRESET,
    PRESET_EXACT,
    PRESET_NORMAL,
    PRESET_PRECEDENCE,
    PRESET_QUIRKS,
    PRESET_STRICT,
    Configuration,
    find_check,
    find_preset,
    previous_preset,
)
from deblint.control_types import ControlType
from deblint.exceptions import (
    UnknownCheckError,
    UnknownControlTypeError,
    UnknownPresetError,
)


def test_exact_enables_everything() -> None:
    config = PRESET_EXACT.configuration
    assert config.enabled_checks() == [c.name for c in ALL_CHECKS]


def test_quirks_disables_everything() -> None:
    assert PRESET_QUIRKS.configuration.enabled_checks() == []


def test_presets_are_increasingly_strict() -> None:
    for idx, preset in enumerate(PRESET_PRECEDENCE):
        enabled = set(preset.configuration.enabled_checks())
        for stricter in PRESET_PRECEDENCE[idx + 1 :]:
            assert enabled <= set(stricter.configuration.enabled_checks()), (
                f"{stricter.name} must enable everything {preset.name} enables"
            )


def test_every_check_has_a_setting() -> None:
    attributes = {
        f.name
        for f in dataclasses.fields(Configuration)
        if f.name not in ("checked_type", "target_file")
    }
    assert attributes == {c.attribute for c in ALL_CHECKS}
    assert all(c.description for c in ALL_CHECKS)


def test_check_names_are_unique() -> None:
    names = [c.name.lower() for c in ALL_CHECKS]
    assert len(names) == len(set(names))


def test_normal_preset_selection() -> None:
    config = PRESET_NORMAL.configuration
    assert config.is_enabled("emptyFields")
    assert config.is_enabled("url")
    assert not config.is_enabled("urlExists")
    assert not config.is_enabled("strictArch")
    assert PRESET_STRICT.configuration.is_enabled("strictArch")
    assert not PRESET_STRICT.configuration.is_enabled("urlExists")
    assert DEFAULT_PRESET is PRESET_NORMAL


def test_with_overrides_does_not_modify_presets() -> None:
    config = PRESET_NORMAL.configuration.with_overrides(
        enable=["strictArch"],
        disable=["emptyFields"],
    )
    assert config.strict_arch
    assert not config.empty_fields
    assert not PRESET_NORMAL.configuration.strict_arch
    assert PRESET_NORMAL.configuration.empty_fields
    with pytest.raises(dataclasses.FrozenInstanceError):
        PRESET_NORMAL.configuration.strict_arch = True  # type: ignore


def test_disable_wins_over_enable() -> None:
    config = PRESET_QUIRKS.configuration.with_overrides(
        enable=["trailingSpace"],
        disable=["trailingspace"],
    )
    assert not config.trailing_space


def test_with_overrides_without_changes() -> None:
    config = PRESET_STRICT.configuration
    assert config.with_overrides() is config


def test_for_file() -> None:
    config = PRESET_NORMAL.configuration.for_file(ControlType.CHANGES)
    assert config.checked_type == ControlType.CHANGES
    assert config.effective_target_file == ".changes"
    assert config.enabled_checks() == PRESET_NORMAL.configuration.enabled_checks()

    config = config.for_file(ControlType.SOURCE_CONTROL, "foo_1.0-1.dsc")
    assert config.effective_target_file == "foo_1.0-1.dsc"


@pytest.mark.parametrize(
    "name,expected",
    [
        ("trailingSpace", "trailing_space"),
        ("TRAILINGSPACE", "trailing_space"),
        ("urlexists", "url_exists"),
        ("url", "url"),
    ],
)
def test_find_check(name: str, expected: str) -> None:
    assert find_check(name).attribute == expected


def test_find_unknown_check() -> None:
    with pytest.raises(UnknownCheckError) as e:
        find_check("noSuchCheck")
    assert e.value.message == 'Unknown check "noSuchCheck"'
    with pytest.raises(UnknownCheckError):
        PRESET_NORMAL.configuration.with_overrides(enable=["noSuchCheck"])


def test_find_preset() -> None:
    assert find_preset("Strict") is PRESET_STRICT
    with pytest.raises(UnknownPresetError):
        find_preset("lenient")


def test_previous_preset() -> None:
    assert previous_preset(PRESET_QUIRKS) is None
    assert previous_preset(PRESET_NORMAL) is PRESET_QUIRKS
    assert previous_preset(PRESET_EXACT) is PRESET_STRICT


@pytest.mark.parametrize(
    "type_name,control_type,default_file",
    [
        ("debian/control", ControlType.SOURCE_PACKAGE_CONTROL, "control"),
        ("DEBIAN/control", ControlType.BINARY_PACKAGE_CONTROL, "control"),
        ("debian/copyright", ControlType.COPYRIGHT, "copyright"),
        (".dsc", ControlType.SOURCE_CONTROL, ".dsc"),
        (".changes", ControlType.CHANGES, ".changes"),
    ],
)
def test_control_types(
    type_name: str,
    control_type: ControlType,
    default_file: str,
) -> None:
    assert ControlType.from_type_name(type_name) is control_type
    assert control_type.default_file == default_file
    assert control_type.supports_pgp == (type_name in (".dsc", ".changes"))
    assert control_type.allows_comments == (type_name == "debian/control")


def test_unknown_control_type() -> None:
    with pytest.raises(UnknownControlTypeError):
        ControlType.from_type_name("debian/changelog")
