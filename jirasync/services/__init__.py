"""Services"""

from jirasync.services.bridge import IssueSyncBridge
from jirasync.services.jira_client import JiraClient
from jirasync.services.webhooks import WebhookRegistrar

__all__ = ["IssueSyncBridge", "JiraClient", "WebhookRegistrar"]
