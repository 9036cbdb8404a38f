import base64
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
import urllib3

from .config import Config
from .constants import BLOCKING_LINK_TYPE, JIRA_API_PREFIX
from .errors import UpstreamError
from .models import FieldDefinition, IssueLink, IssueSummary, JiraIssue

logger = logging.getLogger(__name__)


def _name_of(value: Any, attr: str = "name") -> Optional[str]:
    if isinstance(value, dict):
        return value.get(attr)
    return None


def extract_blocking_links(issue_links: Any) -> List[IssueLink]:
    """
    Mantém apenas links do tipo "Blocks" com inwardIssue, na ordem do Jira.
    """
    links: List[IssueLink] = []
    if not isinstance(issue_links, list):
        return links
    for link in issue_links:
        if not isinstance(link, dict):
            continue
        if _name_of(link.get("type")) != BLOCKING_LINK_TYPE:
            continue
        inward = link.get("inwardIssue")
        if not isinstance(inward, dict) or not inward.get("key"):
            continue
        inward_fields = inward.get("fields") or {}
        links.append(IssueLink(
            key=inward["key"],
            link_type=BLOCKING_LINK_TYPE,
            summary=inward_fields.get("summary") if isinstance(inward_fields, dict) else None,
        ))
    return links


def parse_issue(data: Any, requested_key: str = "") -> JiraIssue:
    if not isinstance(data, dict):
        raise UpstreamError("Jira API returned an unexpected issue payload", status=None)
    fields = data.get("fields") or {}
    if not isinstance(fields, dict):
        fields = {}
    return JiraIssue(
        key=data.get("key") or requested_key,
        summary=fields.get("summary") or "",
        status=_name_of(fields.get("status")),
        assignee=_name_of(fields.get("assignee"), "displayName"),
        priority=_name_of(fields.get("priority")),
        issue_type=_name_of(fields.get("issuetype")),
        created=fields.get("created"),
        updated=fields.get("updated"),
        blocking_links=tuple(extract_blocking_links(fields.get("issuelinks"))),
        fields=fields,
    )


class JiraClient:
    def __init__(self, config: Config):
        self.base_url = config.jira_base_url.rstrip('/')
        self.email = config.jira_email
        self.api_token = config.jira_api_token
        self.timeout = config.request_timeout
        self.verify_tls = config.verify_tls

        # Suprime avisos de HTTPS inseguro quando a verificação TLS está desativada
        if not self.verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.debug("Avisos de InsecureRequestWarning desabilitados (JIRA_VERIFY_TLS=false)")

    # ---------- Setup helpers ----------

    def _headers(self) -> Dict[str, str]:
        token = base64.b64encode(f"{self.email}:{self.api_token}".encode("utf-8")).decode("ascii")
        return {
            "Authorization": f"Basic {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, params: Optional[Dict] = None) -> requests.Response:
        url = f"{self.base_url}{JIRA_API_PREFIX}{path}"
        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                timeout=self.timeout,
                verify=self.verify_tls,
            )
        except requests.RequestException as exc:
            # Timeout e erro de conexão seguem o mesmo caminho de uma resposta não-2xx
            raise UpstreamError(f"Jira API request failed: {exc.__class__.__name__}", status=None) from exc
        if not resp.ok:
            raise UpstreamError(
                f"Jira API error: {resp.status_code} {resp.reason or ''}".strip(),
                status=resp.status_code,
                body=resp.text,
            )
        return resp

    def _get_json(self, path: str, params: Optional[Dict] = None) -> Any:
        resp = self._request("GET", path, params=params)
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError("Jira API returned invalid JSON", status=resp.status_code, body=resp.text) from exc

    # ---------- Public API ----------

    def browse_url(self, key: str) -> str:
        return f"{self.base_url}/browse/{key}"

    def fetch_issue(self, key: str, expand_links: bool = False) -> JiraIssue:
        params = {"expand": "issuelinks"} if expand_links else None
        data = self._get_json(f"/issue/{quote(key, safe='')}", params=params)
        issue = parse_issue(data, requested_key=key)
        logger.debug(f"Issue {issue.key} obtida (links de bloqueio: {len(issue.blocking_links)})")
        return issue

    def fetch_issue_summary(self, key: str, expand_links: bool = False):
        """Retorna (IssueSummary, JiraIssue) para a issue principal."""
        issue = self.fetch_issue(key, expand_links=expand_links)
        return IssueSummary(key=issue.key, summary=issue.summary, url=self.browse_url(issue.key)), issue

    def fetch_fields(self) -> List[FieldDefinition]:
        data = self._get_json("/field")
        if not isinstance(data, list):
            raise UpstreamError("Jira API returned an unexpected field list", status=None)
        definitions = []
        for item in data:
            if isinstance(item, dict) and item.get("id"):
                definitions.append(FieldDefinition(id=str(item["id"]), name=str(item.get("name") or "")))
        logger.debug(f"Metadados de campos obtidos: {len(definitions)} campos")
        return definitions
