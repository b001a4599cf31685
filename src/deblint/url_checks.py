import re
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import requests

from deblint.reference_data import URL_SCHEMES, URL_SCHEMES_WITH_HOST
from deblint.util import _debug

if TYPE_CHECKING:
    from deblint.linting.lint_util import LintState


URL_PROBE_TIMEOUT = 30

_RE_WHITESPACE = re.compile(r"\s")


def is_valid_url(value: str) -> bool:
    """Whether the value is an absolute URL with a supported scheme

    >>> is_valid_url("https://example.com/")
    True
    >>> is_valid_url("example.com")
    False
    >>> is_valid_url("https:///no-host")
    False
    """
    if not value or _RE_WHITESPACE.search(value):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if parsed.scheme not in URL_SCHEMES:
        return False
    if parsed.scheme in URL_SCHEMES_WITH_HOST and not parsed.netloc:
        return False
    return True


def check_url(url: str, lint_state: "LintState") -> None:
    """Apply the HTTPS and reachability checks to a well-formed URL"""
    config = lint_state.config
    if config.url_force_https and urlparse(url).scheme != "https":
        lint_state.report(f"URL does not use HTTPS: {url}", "urlForceHttps")
    if config.url_exists:
        _probe_url(url, lint_state)


def _probe_url(url: str, lint_state: "LintState") -> None:
    if urlparse(url).scheme not in URL_SCHEMES_WITH_HOST:
        return
    _debug(f"Probing {url}")
    try:
        response = requests.head(
            url,
            allow_redirects=True,
            timeout=URL_PROBE_TIMEOUT,
        )
    except requests.RequestException as e:
        _debug(f"Probing {url} failed: {e}")
        lint_state.report(f"URL not found: {url}", "urlExists")
        return
    if not 200 <= response.status_code < 300:
        lint_state.report(
            f"URL returned invalid response code (HTTP {response.status_code}): {url}",
            "urlExists",
        )
