"""Jira project URL parsing"""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from jirasync.services.errors import MalformedURLError

_PREFIX_RE = re.compile(r"^(?P<prefix>https?://.*?)/browse/")
_KEY_RE = re.compile(r"/browse/(?P<key>[^/]+)(?:/|$)")


@dataclass(frozen=True)
class ProjectRef:
    api_prefix: str
    project_key: str


def parse_project_url(project_url: str) -> ProjectRef:
    """Split a Jira browse URL into its API prefix and project key.

    ``https://acme.atlassian.net/browse/CRASH`` becomes
    ``ProjectRef("https://acme.atlassian.net", "CRASH")``. The URL is not
    normalized; callers are expected to supply a browse URL as Jira shows it.
    """
    if not project_url:
        raise MalformedURLError(str(project_url), "empty URL")

    try:
        parsed = urlparse(project_url)
    except ValueError as e:
        raise MalformedURLError(project_url, str(e)) from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise MalformedURLError(project_url, "not an absolute http(s) URL")

    prefix = _PREFIX_RE.match(project_url)
    key = _KEY_RE.search(parsed.path)
    if not prefix or not key:
        raise MalformedURLError(project_url)

    return ProjectRef(api_prefix=prefix.group("prefix"), project_key=key.group("key"))
