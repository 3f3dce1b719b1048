import copy
import unittest

from jirasync.config import DEFAULT_SNAPSHOT_FIELDS


def _raw_issue(**fields):
    return {
        "id": "10001",
        "key": "CRASH-1",
        "self": "https://acme.atlassian.net/rest/api/2/issue/10001",
        "expand": "renderedFields",
        "fields": fields,
    }


class ProjectIssueTests(unittest.TestCase):
    def test_fields_outside_allowlist_are_dropped(self):
        from jirasync.services.snapshot import project_issue

        issue = _raw_issue(summary="Boom", customfield_10010="secret", labels=["x"])
        snapshot = project_issue(issue)

        self.assertEqual(snapshot["id"], "10001")
        self.assertEqual(snapshot["key"], "CRASH-1")
        self.assertEqual(snapshot["summary"], "Boom")
        self.assertNotIn("customfield_10010", snapshot)
        self.assertNotIn("labels", snapshot)
        self.assertNotIn("expand", snapshot)

    def test_missing_allowlisted_fields_are_none(self):
        from jirasync.services.snapshot import project_issue

        snapshot = project_issue(_raw_issue(summary="Boom"))

        for name in DEFAULT_SNAPSHOT_FIELDS:
            self.assertIn(name, snapshot)
        self.assertIsNone(snapshot["resolution"])
        self.assertIsNone(snapshot["assignee"])
        self.assertNotIn("comments", snapshot)

    def test_self_links_are_stripped_everywhere(self):
        from jirasync.services.snapshot import project_issue

        user = {"self": "https://acme/rest/api/2/user?x", "name": "alice", "displayName": "Alice"}
        issue = _raw_issue(
            status={"self": "https://acme/rest/api/2/status/1", "name": "Open", "id": "1"},
            assignee=user,
            comment={
                "comments": [
                    {"self": "https://acme/c/1", "id": "1", "body": "first", "author": user},
                    {"self": "https://acme/c/2", "id": "2", "body": "second", "author": user},
                ],
                "total": 2,
            },
        )

        snapshot = project_issue(issue)

        def _has_self(value):
            if isinstance(value, dict):
                return "self" in value or any(_has_self(v) for v in value.values())
            if isinstance(value, list):
                return any(_has_self(v) for v in value)
            return False

        self.assertFalse(_has_self(snapshot))
        self.assertEqual(snapshot["status"], {"name": "Open", "id": "1"})
        self.assertEqual([c["body"] for c in snapshot["comments"]], ["first", "second"])
        self.assertEqual(snapshot["comments"][0]["author"]["name"], "alice")

    def test_input_issue_is_not_mutated(self):
        from jirasync.services.snapshot import project_issue

        issue = _raw_issue(
            status={"self": "https://acme/status/1", "name": "Open"},
            comment={"comments": [{"self": "https://acme/c/1", "body": "hi"}]},
        )
        before = copy.deepcopy(issue)

        project_issue(issue)

        self.assertEqual(issue, before)

    def test_custom_allowlist(self):
        from jirasync.services.snapshot import project_issue

        snapshot = project_issue(_raw_issue(summary="Boom", labels=["a"]), ["labels"])

        self.assertEqual(snapshot, {"id": "10001", "key": "CRASH-1", "labels": ["a"]})


if __name__ == "__main__":
    unittest.main()
