"""Crash platform <-> Jira issue synchronization"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

import requests
from jira.exceptions import JIRAError
from pydantic import BaseModel, ValidationError

from jirasync.config import settings
from jirasync.schemas import (
    IntegrationRequestPayload,
    IssueImpactChangePayload,
    IssueResolutionChangePayload,
    ServiceConfig,
    VerificationPayload,
)
from jirasync.services.errors import (
    AuthenticationError,
    IssueCreateFailed,
    MalformedURLError,
    ProjectNotFoundError,
    RegistrationError,
)
from jirasync.services.jira_client import JiraClient
from jirasync.services.snapshot import project_issue
from jirasync.services.url_parser import ProjectRef, parse_project_url
from jirasync.services.webhooks import WebhookRegistrar, callback_webhook_url

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

SUMMARY_SUFFIX = " [Crashlytics]"
RESOLVED_COMMENT = "This CR has been marked as resolved in Crashlytics"
REOPENED_COMMENT = "This CR has been reopened in Crashlytics"

VERIFIED_MESSAGE = "Successfully verified Jira settings"
WEBHOOK_WARNING_MESSAGE = (
    "Successfully verified Jira settings but Jira's webhook could not be registered. "
    "You need to use an Admin account to set it up."
)
SETTINGS_ERROR_MESSAGE = "Oops! Please check your settings again."
PROJECT_URL_ERROR_MESSAGE = "Oops! Is your project url correct?"


class SyncStatus(str, enum.Enum):
    """Outcome of a fetch or resolution sync"""
    OK = "ok"
    NOOP = "noop"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"


@dataclass
class SyncResult:
    status: SyncStatus
    snapshot: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: Exception) -> "SyncResult":
        if isinstance(exc, ProjectNotFoundError):
            status = SyncStatus.NOT_FOUND
        elif isinstance(exc, JIRAError) and exc.status_code == 404:
            status = SyncStatus.NOT_FOUND
        elif isinstance(exc, (ValidationError, MalformedURLError, KeyError, TypeError)):
            status = SyncStatus.PARSE_ERROR
        elif isinstance(exc, ValueError) and not isinstance(exc, requests.RequestException):
            status = SyncStatus.PARSE_ERROR
        else:
            status = SyncStatus.TRANSPORT_ERROR
        return cls(status=status, error=str(exc))

    def to_response(self) -> Union[Dict[str, Any], bool]:
        """Collapse to what the crash platform expects: a snapshot, True or False."""
        if self.status == SyncStatus.OK:
            return self.snapshot
        return self.status == SyncStatus.NOOP


@dataclass(frozen=True)
class TransitionRequest:
    transition_id: str
    comment_body: str

    @classmethod
    def for_resolution(cls, resolved: bool) -> "TransitionRequest":
        if resolved:
            return cls(settings.resolve_transition_id, RESOLVED_COMMENT)
        return cls(settings.reopen_transition_id, REOPENED_COMMENT)

    def to_json(self) -> Dict[str, Any]:
        return {
            "update": {"comment": [{"add": {"body": self.comment_body}}]},
            "transition": {"id": self.transition_id},
        }


def _pluralize(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def build_issue_description(event: IssueImpactChangePayload) -> str:
    """Human readable Jira description for a crash impact event."""
    users_text = _pluralize(
        event.impacted_devices_count,
        "This issue is affecting at least 1 user who has crashed ",
        f"This issue is affecting at least {event.impacted_devices_count} users who have crashed ",
    )
    crashes_text = _pluralize(
        event.crashes_count, "at least 1 time.\n\n", f"at least {event.crashes_count} times.\n\n"
    )
    return (
        "Crashlytics detected a new issue.\n"
        f"{event.title} in {event.method}\n\n"
        + users_text
        + crashes_text
        + f"More information: {event.url}"
    )


def _coerce(model: Type[M], value: Any) -> M:
    if isinstance(value, model):
        return value
    return model.model_validate(value)


def _project_url(config: Any) -> Optional[str]:
    if isinstance(config, dict):
        return config.get("project_url")
    return getattr(config, "project_url", None)


class IssueSyncBridge:
    """Entry points invoked by the crash platform's service hook dispatcher.

    Every call is independent: the Jira client is rebuilt from the call's
    config, nothing is cached between calls. ``timeout`` (seconds) bounds each
    Jira request; it falls back to ``settings.jira_timeout_seconds``.
    """

    def __init__(
        self,
        client_factory: Callable[..., JiraClient] = JiraClient,
        registrar: Optional[WebhookRegistrar] = None,
        snapshot_fields: Optional[List[str]] = None,
    ):
        self.client_factory = client_factory
        self.registrar = registrar or WebhookRegistrar()
        self.snapshot_fields = (
            list(snapshot_fields) if snapshot_fields is not None else settings.snapshot_field_list()
        )

    def _connect(
        self, config: Any, timeout: Optional[float]
    ) -> Tuple[ServiceConfig, ProjectRef, JiraClient]:
        cfg = _coerce(ServiceConfig, config)
        ref = parse_project_url(cfg.project_url)
        client = self.client_factory(
            ref.api_prefix,
            cfg.username,
            cfg.password.get_secret_value(),
            timeout=timeout if timeout is not None else settings.jira_timeout_seconds,
        )
        return cfg, ref, client

    def project(self, issue: Dict[str, Any]) -> Dict[str, Any]:
        return project_issue(issue, self.snapshot_fields)

    def create_issue(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> Dict[str, str]:
        """Create a Jira issue for a crash impact event.

        Returns the Jira ``id``/``key`` pair the crash platform stores to
        address the issue later. Any failure raises ``IssueCreateFailed``; the
        call is never retried here.
        """
        try:
            event = _coerce(IssueImpactChangePayload, payload)
            _cfg, ref, client = self._connect(config, timeout)
            project = client.get_project(ref.project_key)

            post_body = {
                "fields": {
                    "project": {"id": project.id},
                    "summary": event.title + SUMMARY_SUFFIX,
                    "description": build_issue_description(event),
                    "issuetype": {"id": settings.default_issue_type_id},
                }
            }
            resp = client.post_json(f"{ref.api_prefix}/rest/api/2/issue", post_body)
        except JIRAError as e:
            raise IssueCreateFailed(
                f"{e.status_code}, body: {e.text}", status_code=e.status_code, body=e.text
            ) from e
        except Exception as e:
            raise IssueCreateFailed(str(e)) from e

        if resp.status_code != 201:
            raise IssueCreateFailed(
                f"{resp.status_code}, body: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            body = resp.json()
            result = {"jira_story_id": str(body["id"]), "jira_story_key": body["key"]}
        except (ValueError, KeyError, TypeError) as e:
            raise IssueCreateFailed(
                f"unreadable create response: {e}", status_code=resp.status_code, body=resp.text
            ) from e

        logger.info(f"Created Jira issue {result['jira_story_key']} in project {ref.project_key}")
        return result

    def verify(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> Tuple[bool, str]:
        """Check that the project is readable and, if syncing, register the webhook."""
        try:
            cfg, ref, client = self._connect(config, timeout)
            client.get_project(ref.project_key)
        except (AuthenticationError, JIRAError) as e:
            logger.warning(f"HTTP Error: verification of {_project_url(config)} failed: {e}")
            return False, SETTINGS_ERROR_MESSAGE
        except Exception as e:
            logger.warning(f"Rescued a verification error in jira: (url={_project_url(config)}) {e}")
            return False, PROJECT_URL_ERROR_MESSAGE

        if not cfg.sync_issues:
            return True, VERIFIED_MESSAGE

        try:
            verification = _coerce(VerificationPayload, payload)
            self.registrar.register(client, callback_webhook_url(verification.app.id))
        except (RegistrationError, ValidationError) as e:
            logger.warning(f"Jira webhook not registered for {cfg.project_url}: {e}")
            return True, WEBHOOK_WARNING_MESSAGE
        except Exception as e:
            logger.error(f"Unexpected error registering Jira webhook for {cfg.project_url}: {e}")
            return True, WEBHOOK_WARNING_MESSAGE

        return True, VERIFIED_MESSAGE

    def fetch_issue_result(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> SyncResult:
        try:
            request = _coerce(IntegrationRequestPayload, payload)
            _cfg, _ref, client = self._connect(config, timeout)
            issue = client.get_issue(request.jira_story_id)
            return SyncResult(SyncStatus.OK, snapshot=self.project(issue))
        except Exception as e:
            logger.warning(
                f"Rescued a service hook request error in jira: (url={_project_url(config)}) {e}"
            )
            return SyncResult.from_exception(e)

    def fetch_issue(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> Union[Dict[str, Any], bool]:
        """Snapshot of the correlated Jira issue, or False if it could not be fetched."""
        return self.fetch_issue_result(config, payload, timeout=timeout).to_response()

    def sync_resolution_result(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> SyncResult:
        try:
            request = _coerce(IssueResolutionChangePayload, payload)
            _cfg, _ref, client = self._connect(config, timeout)

            jira_id = request.jira_story_id
            issue = client.get_issue(jira_id)
            jira_resolved = (issue.get("fields") or {}).get("resolution") is not None
            platform_resolved = request.resolved_at is not None

            if not jira_resolved and not platform_resolved:
                logger.info(f"Jira ticket {jira_id} is open, no need to call API.")
                return SyncResult(SyncStatus.NOOP)
            if jira_resolved and platform_resolved:
                logger.info(f"Jira ticket {jira_id} is resolved already.")
                return SyncResult(SyncStatus.NOOP)

            transition = TransitionRequest.for_resolution(platform_resolved)
            client.post_json(
                f"{issue['self']}/transitions?expand=transitions.fields", transition.to_json()
            )
            logger.info(f"Applied transition {transition.transition_id} to Jira ticket {jira_id}")

            # The transition response is not a full issue; re-read it.
            return SyncResult(SyncStatus.OK, snapshot=self.project(client.get_issue(jira_id)))
        except Exception as e:
            logger.warning(
                f"Rescued a service hook request error in jira: (url={_project_url(config)}) {e}"
            )
            return SyncResult.from_exception(e)

    def sync_resolution(
        self, config: Any, payload: Any, *, timeout: Optional[float] = None
    ) -> Union[Dict[str, Any], bool]:
        """Carry a resolve/reopen from the crash platform over to Jira.

        Returns the refreshed snapshot after a transition, True when both sides
        already agree, False on any failure.
        """
        return self.sync_resolution_result(config, payload, timeout=timeout).to_response()
