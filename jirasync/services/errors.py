"""Failures raised by the Jira sync services"""

from typing import Optional


class JiraSyncError(Exception):
    """Base class for every failure raised by this package."""


class MalformedURLError(JiraSyncError):
    def __init__(self, url: str, reason: str = "expected a .../browse/<PROJECTKEY> URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed Jira project URL '{url}': {reason}")


class ProjectNotFoundError(JiraSyncError):
    def __init__(self, project_key: str):
        self.project_key = project_key
        super().__init__(f"Jira project '{project_key}' not found")


class AuthenticationError(JiraSyncError):
    """Jira rejected the supplied credentials (401/403)."""

    def __init__(self, status_code: Optional[int], message: str = ""):
        self.status_code = status_code
        super().__init__(f"Jira authentication failed ({status_code}): {message}".rstrip(": "))


class IssueCreateFailed(JiraSyncError):
    def __init__(
        self, reason: str, status_code: Optional[int] = None, body: Optional[str] = None
    ):
        self.reason = reason
        self.status_code = status_code
        self.body = body
        super().__init__(f"Jira Issue Create Failed: {reason}")


class RegistrationError(JiraSyncError):
    """Webhook list/delete/create call failed."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Jira webhook registration failed: {reason}")
