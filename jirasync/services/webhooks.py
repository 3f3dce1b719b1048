"""Jira webhook registration"""

import logging
from typing import Any, Dict, List, Optional

from jira.exceptions import JIRAError

from jirasync.config import settings
from jirasync.services.errors import RegistrationError
from jirasync.services.jira_client import JiraClient

logger = logging.getLogger(__name__)


def callback_webhook_url(app_id: Any) -> str:
    """URL Jira calls back on the crash platform for a given app."""
    base = settings.callback_base_url.rstrip("/")
    return f"{base}/api/v3/projects/{app_id}/service_hooks/{settings.integration_name}/responses"


class WebhookRegistrar:
    """Keep exactly one Jira webhook pointing at our callback URL.

    Existing subscriptions with the same URL are deleted before the new one is
    created, which also cleans up after a previous half-finished attempt.
    List/delete/create is not atomic: two concurrent registrations can both
    delete and recreate, but only one subscription survives once they settle.
    """

    def __init__(self, name: Optional[str] = None, events: Optional[List[str]] = None):
        self.name = name or settings.webhook_name
        self.events = list(events) if events is not None else settings.webhook_event_list()

    def webhook_params(self, callback_url: str) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": callback_url,
            "events": list(self.events),
            "excludeIssueDetails": False,
        }

    def register(self, client: JiraClient, callback_url: str) -> None:
        try:
            current_hooks = client.list_webhooks()
            removed = 0
            for hook in current_hooks:
                if hook.get("url") == callback_url and hook.get("self"):
                    client.delete(hook["self"])
                    removed += 1
            if removed:
                logger.info(f"Removed {removed} duplicate webhook(s) for {callback_url}")

            client.create_webhook(self.webhook_params(callback_url))
        except JIRAError as e:
            logger.warning(f"HTTP Error: webhook request(status: {e.status_code}, message: {e.text})")
            raise RegistrationError(e.text or str(e), status_code=e.status_code) from e
        except Exception as e:
            logger.warning(f"Webhook request failed for {callback_url}: {e}")
            raise RegistrationError(str(e), status_code=JiraClient.status_code(e)) from e
