"""Jira REST client wrapper"""
import json
import logging
from typing import Any, Dict, List, Optional

from jira import JIRA
from jira.exceptions import JIRAError

from jirasync.services.errors import AuthenticationError, ProjectNotFoundError

logger = logging.getLogger(__name__)

AUTH_STATUS_CODES = (401, 403)


class JiraClient:
    """Wrapper for the handful of Jira REST operations the bridge needs.

    One instance is built per inbound call from that call's credentials.
    The JIRA session applies ``timeout`` to every request it sends. Retries are
    disabled: the caller owns the deadline and the retry policy.
    """

    def __init__(self, server: str, username: str, password: str, timeout: Optional[float] = None):
        """Initialize Jira client"""
        self.server = server
        self.timeout = timeout
        self.jira = JIRA(
            server=server,
            basic_auth=(username, password),
            max_retries=0,
            timeout=timeout,
            get_server_info=False,
        )

    @property
    def session(self):
        return self.jira._session

    @staticmethod
    def status_code(exc: Exception) -> Optional[int]:
        """HTTP status carried by a Jira/requests error, if any."""
        rc = getattr(exc, "status_code", None)
        if rc is None:
            response = getattr(exc, "response", None)
            rc = getattr(response, "status_code", None)
        return rc

    def get_project(self, project_key: str) -> Any:
        """Get project by key"""
        try:
            return self.jira.project(project_key)
        except JIRAError as e:
            rc = self.status_code(e)
            logger.error(f"Failed to get project {project_key}: {rc} {e.text}")
            if rc == 404:
                raise ProjectNotFoundError(project_key) from e
            if rc in AUTH_STATUS_CODES:
                raise AuthenticationError(rc, e.text or "") from e
            raise

    def get_issue(self, issue_id: str) -> Dict[str, Any]:
        """Get an issue by id or key, as Jira's raw JSON"""
        try:
            return self.jira.issue(issue_id).raw
        except JIRAError as e:
            logger.error(f"Failed to get issue {issue_id}: {self.status_code(e)} {e.text}")
            raise

    def get_json(self, url: str) -> Any:
        response = self.session.get(url)
        return response.json()

    def post_json(self, url: str, payload: Dict[str, Any]):
        """POST a JSON body and return the raw response."""
        return self.session.post(url, data=json.dumps(payload))

    def delete(self, url: str):
        return self.session.delete(url)

    def list_webhooks(self) -> List[Dict[str, Any]]:
        hooks = self.get_json(f"{self.server}/rest/webhooks/1.0/webhook")
        if not isinstance(hooks, list):
            raise ValueError(f"Expected a list of webhooks, got {type(hooks).__name__}")
        return hooks

    def create_webhook(self, webhook: Dict[str, Any]):
        response = self.post_json(f"{self.server}/rest/webhooks/1.0/webhook", webhook)
        logger.info(f"Registered Jira webhook '{webhook.get('name')}' -> {webhook.get('url')}")
        return response
