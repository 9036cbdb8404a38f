#!/usr/bin/env python3
import base64
import os
import sys
import unittest
from unittest.mock import patch

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.dirname(__file__))

from jira_release.errors import UpstreamError
from jira_release.jira import JiraClient, extract_blocking_links
from fakes import FakeJira, FakeResponse, blocks_link, issue_json, make_config


class TestExtractBlockingLinks(unittest.TestCase):
    def test_only_inward_blocks_links_in_order(self):
        links = [
            blocks_link("PROJ-2", "First"),
            {"type": {"name": "Blocks"}, "outwardIssue": {"key": "PROJ-9", "fields": {"summary": "Outward"}}},
            {"type": {"name": "Relates"}, "inwardIssue": {"key": "PROJ-8", "fields": {"summary": "Related"}}},
            blocks_link("PROJ-3", "Second"),
            "garbage",
        ]
        result = extract_blocking_links(links)
        self.assertEqual([link.key for link in result], ["PROJ-2", "PROJ-3"])
        self.assertEqual(result[0].summary, "First")

    def test_missing_links(self):
        self.assertEqual(extract_blocking_links(None), [])


class TestJiraClient(unittest.TestCase):
    def setUp(self):
        self.jira = FakeJira()
        patcher = patch('jira_release.jira.requests.request', side_effect=self.jira)
        self.request = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = JiraClient(make_config())

    def test_fetch_issue_with_links_uses_basic_auth(self):
        self.jira.add_issue(issue_json("PROJ-1", "Release 1.0", links=[blocks_link("PROJ-2", "Fix")]))
        issue = self.client.fetch_issue("PROJ-1", expand_links=True)

        self.assertEqual(issue.key, "PROJ-1")
        self.assertEqual(issue.summary, "Release 1.0")
        self.assertEqual(issue.status, "Released")
        self.assertEqual(issue.assignee, "Ana Souza")
        self.assertEqual([link.key for link in issue.blocking_links], ["PROJ-2"])

        args, kwargs = self.request.call_args
        self.assertEqual(args[0], "GET")
        self.assertEqual(args[1], "https://jira.example.com/rest/api/3/issue/PROJ-1")
        self.assertEqual(kwargs["params"], {"expand": "issuelinks"})
        self.assertIsNotNone(kwargs["timeout"])
        expected = base64.b64encode(b"bot@example.com:super-secret-token").decode("ascii")
        self.assertEqual(kwargs["headers"]["Authorization"], f"Basic {expected}")

    def test_fetch_issue_without_expansion(self):
        self.jira.add_issue(issue_json("PROJ-2", "Fix"))
        self.client.fetch_issue("PROJ-2")
        self.assertIsNone(self.request.call_args[1]["params"])

    def test_non_2xx_raises_upstream_error_with_status(self):
        self.jira.fail_issue("PROJ-1", status=404)
        with self.assertRaises(UpstreamError) as ctx:
            self.client.fetch_issue("PROJ-1", expand_links=True)
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.service, "jira")

    def test_timeout_is_an_upstream_error(self):
        self.jira.fail_issue("PROJ-1", exc=requests.Timeout("read timed out"))
        with self.assertRaises(UpstreamError) as ctx:
            self.client.fetch_issue("PROJ-1")
        self.assertIsNone(ctx.exception.status)

    def test_invalid_json_is_an_upstream_error(self):
        self.jira.issues["PROJ-1"] = FakeResponse(200, None, text="<html>")
        with self.assertRaises(UpstreamError):
            self.client.fetch_issue("PROJ-1")

    def test_fetch_fields_skips_entries_without_id(self):
        self.jira.set_fields([
            {"id": "summary", "name": "Summary"},
            {"name": "orphan"},
            {"id": "customfield_100", "name": "Drupal Issue ID"},
        ])
        fields = self.client.fetch_fields()
        self.assertEqual([f.id for f in fields], ["summary", "customfield_100"])

    def test_browse_url(self):
        self.assertEqual(self.client.browse_url("PROJ-1"), "https://jira.example.com/browse/PROJ-1")


if __name__ == '__main__':
    unittest.main()
