import pytest

from deblint.util import setup_logging


@pytest.fixture(scope="session", autouse=True)
def enable_logging() -> None:
    setup_logging(reconfigure_logging=True)
