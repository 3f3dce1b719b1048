"""Application configuration"""

from typing import List

from pydantic_settings import BaseSettings

DEFAULT_SNAPSHOT_FIELDS = (
    "assignee",
    "created",
    "creator",
    "description",
    "issuetype",
    "priority",
    "project",
    "reporter",
    "resolution",
    "resolutiondate",
    "status",
    "summary",
    "updated",
)


def _split_csv(value: str | None) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings"""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Auth (optional)
    # When enabled, all routes are protected by HTTP Basic auth, except for /health.
    auth_enabled: bool = False
    auth_username: str | None = None
    auth_password: str | None = None

    # Crash platform side
    callback_base_url: str = "https://www.crashlytics.com"
    integration_name: str = "jira"

    # Jira webhook registration
    webhook_name: str = "Crashlytics Issue sync"
    # Comma-separated list of Jira webhook events.
    webhook_events: str = "jira:issue_updated"

    # Default per-request deadline (seconds) for every Jira call; callers may override.
    jira_timeout_seconds: float = 30.0

    # Comma-separated allowlist of issue fields copied into snapshots.
    # If empty/omitted, the built-in default set is used.
    snapshot_fields: str | None = None

    # Jira workflow specifics. These depend on how the Jira workflow is configured.
    resolve_transition_id: str = "2"
    reopen_transition_id: str = "3"
    default_issue_type_id: str = "1"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def snapshot_field_list(self) -> List[str]:
        return _split_csv(self.snapshot_fields) or list(DEFAULT_SNAPSHOT_FIELDS)

    def webhook_event_list(self) -> List[str]:
        return _split_csv(self.webhook_events)


settings = Settings()
