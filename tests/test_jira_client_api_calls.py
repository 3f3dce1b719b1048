import json
import logging
import unittest
from types import SimpleNamespace
from unittest.mock import Mock, patch

from jira.exceptions import JIRAError

logging.disable(logging.CRITICAL)


def _client(**attrs):
    from jirasync.services.jira_client import JiraClient

    # Avoid running JiraClient.__init__ (builds a real JIRA session).
    client = JiraClient.__new__(JiraClient)
    client.server = "https://acme.atlassian.net"
    client.timeout = 7.5
    client.jira = Mock()
    for name, value in attrs.items():
        setattr(client, name, value)
    return client


class JiraClientApiCallTests(unittest.TestCase):
    def test_init_builds_jira_without_retries(self):
        from jirasync.services.jira_client import JiraClient

        with patch("jirasync.services.jira_client.JIRA") as jira_ctor:
            client = JiraClient("https://acme.atlassian.net", "bob", "pw", timeout=5)

            self.assertEqual(client.server, "https://acme.atlassian.net")
            jira_ctor.assert_called_once_with(
                server="https://acme.atlassian.net",
                basic_auth=("bob", "pw"),
                max_retries=0,
                timeout=5,
                get_server_info=False,
            )

    def test_get_project_calls_jira_project(self):
        client = _client()
        project = SimpleNamespace(id="10000", key="CRASH")
        client.jira.project.return_value = project

        self.assertIs(client.get_project("CRASH"), project)
        client.jira.project.assert_called_once_with("CRASH")

    def test_get_project_404_raises_project_not_found(self):
        from jirasync.services.errors import ProjectNotFoundError

        client = _client()
        client.jira.project.side_effect = JIRAError(status_code=404, text="No project")

        with self.assertRaises(ProjectNotFoundError):
            client.get_project("NOPE")

    def test_get_project_401_raises_authentication_error(self):
        from jirasync.services.errors import AuthenticationError

        client = _client()
        client.jira.project.side_effect = JIRAError(status_code=401, text="Unauthorized")

        with self.assertRaises(AuthenticationError) as ctx:
            client.get_project("CRASH")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_get_project_other_http_errors_propagate(self):
        client = _client()
        client.jira.project.side_effect = JIRAError(status_code=500, text="boom")

        with self.assertRaises(JIRAError):
            client.get_project("CRASH")

    def test_get_issue_returns_raw_json(self):
        client = _client()
        client.jira.issue.return_value = SimpleNamespace(raw={"id": "1", "key": "CRASH-1"})

        self.assertEqual(client.get_issue("1"), {"id": "1", "key": "CRASH-1"})
        client.jira.issue.assert_called_once_with("1")

    def test_post_json_serializes_body(self):
        client = _client()

        client.post_json("https://acme.atlassian.net/rest/api/2/issue", {"fields": {"a": 1}})

        client.jira._session.post.assert_called_once_with(
            "https://acme.atlassian.net/rest/api/2/issue",
            data=json.dumps({"fields": {"a": 1}}),
        )

    def test_list_webhooks_uses_webhook_endpoint(self):
        client = _client()
        client.jira._session.get.return_value = Mock(json=Mock(return_value=[{"url": "u"}]))

        self.assertEqual(client.list_webhooks(), [{"url": "u"}])
        client.jira._session.get.assert_called_once_with(
            "https://acme.atlassian.net/rest/webhooks/1.0/webhook"
        )

    def test_list_webhooks_rejects_non_list_payload(self):
        client = _client()
        client.jira._session.get.return_value = Mock(json=Mock(return_value={"oops": 1}))

        with self.assertRaises(ValueError):
            client.list_webhooks()

    def test_create_webhook_posts_to_webhook_endpoint(self):
        client = _client()
        hook = {"name": "n", "url": "u", "events": ["jira:issue_updated"], "excludeIssueDetails": False}

        client.create_webhook(hook)

        client.jira._session.post.assert_called_once_with(
            "https://acme.atlassian.net/rest/webhooks/1.0/webhook",
            data=json.dumps(hook),
        )

    def test_delete_passes_url_through(self):
        client = _client()

        client.delete("https://acme.atlassian.net/rest/webhooks/1.0/webhook/3")

        client.jira._session.delete.assert_called_once_with(
            "https://acme.atlassian.net/rest/webhooks/1.0/webhook/3"
        )


if __name__ == "__main__":
    unittest.main()
