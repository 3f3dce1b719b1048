"""Request models for the Jira service hook"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, SecretStr


class ServiceConfig(BaseModel):
    """Per-call settings collected by the crash platform for this integration."""

    project_url: str
    username: str
    password: SecretStr
    sync_issues: bool = False

    class Config:
        frozen = True


class IssueImpactChangePayload(BaseModel):
    title: str
    method: str
    url: str
    impacted_devices_count: int = Field(ge=0)
    crashes_count: int = Field(ge=0)


class AppRef(BaseModel):
    id: Union[int, str]


class VerificationPayload(BaseModel):
    app: AppRef


class IssueImpactChangeRef(BaseModel):
    jira_story_id: Union[int, str]
    jira_story_key: Optional[str] = None


class ServiceHookRef(BaseModel):
    issue_impact_change: IssueImpactChangeRef


class IntegrationRequestPayload(BaseModel):
    service_hook: ServiceHookRef

    @property
    def jira_story_id(self) -> str:
        return str(self.service_hook.issue_impact_change.jira_story_id)


class IssueResolutionChangePayload(IntegrationRequestPayload):
    # Present when the crash platform resolved the issue, absent when it reopened it.
    resolved_at: Optional[datetime] = None


class ServiceHookRequest(BaseModel):
    config: ServiceConfig
    payload: Dict[str, Any] = {}


class IssueImpactChangeRequest(BaseModel):
    config: ServiceConfig
    payload: IssueImpactChangePayload


class VerificationResponse(BaseModel):
    ok: bool
    message: str


class ConfigField(BaseModel):
    name: str
    kind: str
    label: str
    placeholder: Optional[str] = None
    page: str


# Fields the crash platform has to collect before calling this integration.
CONFIG_FIELDS: List[ConfigField] = [
    ConfigField(
        name="project_url",
        kind="string",
        label=(
            "URL to your Jira project. This should be your URL after you select "
            'your project under the "Projects" tab.'
        ),
        placeholder="https://domain.atlassian.net/browse/projectkey",
        page="Project",
    ),
    ConfigField(
        name="username",
        kind="string",
        label="Your Jira username:",
        placeholder="username",
        page="Login Information",
    ),
    ConfigField(
        name="password",
        kind="password",
        label="Your Jira password:",
        placeholder="password",
        page="Login Information",
    ),
    ConfigField(
        name="sync_issues",
        kind="checkbox",
        label="Would you like to sync issue status with Jira?",
        page="Login Information",
    ),
]
