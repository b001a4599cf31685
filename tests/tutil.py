import textwrap
from typing import List, Optional

from deblint.configuration import (
    PRESET_EXACT,
    PRESET_NORMAL,
    PRESET_QUIRKS,
    PRESET_STRICT,
    Configuration,
)
from deblint.control_file import ControlFile
from deblint.control_types import ControlType
from deblint.linting.lint_util import LintState, LintViolation

QUIRKS = PRESET_QUIRKS.configuration
NORMAL = PRESET_NORMAL.configuration
STRICT = PRESET_STRICT.configuration
# Nothing may touch the network during the tests
EXACT = PRESET_EXACT.configuration.with_overrides(disable=["urlExists"])


def lint_state_for(
    config: Configuration,
    control_type: ControlType = ControlType.COPYRIGHT,
) -> LintState:
    return LintState(config.for_file(control_type))


def lint_text(
    text: str,
    config: Configuration,
    control_type: ControlType,
) -> List[LintViolation]:
    control_file = ControlFile(config.for_file(control_type))
    return control_file.lint(textwrap.dedent(text).splitlines())


def messages(
    violations: List[LintViolation],
    check: Optional[str] = None,
) -> List[str]:
    return [v.message for v in violations if check is None or v.check == check]
