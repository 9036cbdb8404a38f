"""
Fakes compartilhados pelos testes: respostas HTTP e um Jira em memória
que substitui requests.request.
"""

from urllib.parse import unquote

from jira_release.config import Config

JIRA_BASE_URL = "https://jira.example.com"
SLACK_WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"
API_TOKEN = "super-secret-token"

VALID_ENV = {
    "JIRA_BASE_URL": JIRA_BASE_URL,
    "JIRA_EMAIL": "bot@example.com",
    "JIRA_API_TOKEN": API_TOKEN,
    "SLACK_WEBHOOK_URL": SLACK_WEBHOOK_URL,
    "BLOCKING_RESOLVE_MAX_WORKERS": "1",
}


def make_config(**overrides):
    values = dict(
        jira_base_url=JIRA_BASE_URL,
        jira_email="bot@example.com",
        jira_api_token=API_TOKEN,
        slack_webhook_url=SLACK_WEBHOOK_URL,
        max_workers=1,
    )
    values.update(overrides)
    return Config(**values)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))
        self.reason = reason or ("OK" if status_code < 400 else "Error")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def blocks_link(key, summary):
    return {
        "type": {"name": "Blocks", "inward": "is blocked by", "outward": "blocks"},
        "inwardIssue": {"key": key, "fields": {"summary": summary}},
    }


def issue_json(key, summary, links=None, **extra_fields):
    fields = {
        "summary": summary,
        "status": {"name": "Released"},
        "assignee": {"displayName": "Ana Souza"},
        "priority": {"name": "High"},
        "issuetype": {"name": "Release"},
        "created": "2024-05-01T10:00:00.000+0000",
        "updated": "2024-05-02T10:00:00.000+0000",
        "issuelinks": links or [],
    }
    fields.update(extra_fields)
    return {"key": key, "fields": fields}


class FakeJira:
    """Roteia chamadas para /rest/api/3/issue/{key} e /rest/api/3/field."""

    def __init__(self, base_url=JIRA_BASE_URL):
        self.base_url = base_url
        self.issues = {}
        self.fields_response = FakeResponse(200, [])
        self.calls = []

    def add_issue(self, payload, status=200):
        self.issues[payload["key"]] = FakeResponse(status, payload)

    def fail_issue(self, key, status=500, exc=None):
        self.issues[key] = exc if exc is not None else FakeResponse(status, {"errorMessages": ["boom"]}, text="boom")

    def set_fields(self, fields, status=200):
        self.fields_response = FakeResponse(status, fields)

    def paths(self):
        return [url[len(self.base_url):] for _, url, _ in self.calls]

    def __call__(self, method, url, headers=None, params=None, timeout=None, verify=True):
        self.calls.append((method, url, params))
        path = url[len(self.base_url):]
        if path == "/rest/api/3/field":
            result = self.fields_response
        elif path.startswith("/rest/api/3/issue/"):
            key = unquote(path[len("/rest/api/3/issue/"):])
            result = self.issues.get(key, FakeResponse(404, {"errorMessages": ["Issue does not exist"]}))
        else:
            result = FakeResponse(404, {})
        if isinstance(result, Exception):
            raise result
        return result
