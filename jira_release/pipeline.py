import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .config import Config, load_config
from .constants import SUCCESS_MESSAGE
from .enrichment import BlockingIssueResolver
from .errors import ConfigError, UpstreamError, ValidationError
from .fields import FieldDirectory
from .formatters import build_release_message
from .jira import JiraClient
from .models import EnrichedRelease
from .services import send_slack_payload

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    IDLE = "idle"
    CONFIG_VALIDATED = "config_validated"
    PAYLOAD_VALIDATED = "payload_validated"
    PRIMARY_FETCHED = "primary_fetched"
    BLOCKING_RESOLVED = "blocking_resolved"
    COMPOSED = "composed"
    SENT = "sent"
    DONE = "done"
    FAILED = "failed"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_payload(body: Any) -> str:
    """Retorna a issue key do payload ou levanta ValidationError."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a valid JSON object")
    issue = body.get("issue")
    if not isinstance(issue, dict):
        raise ValidationError("Request body must contain issue.key")
    key = issue.get("key")
    if not isinstance(key, str) or not key.strip():
        raise ValidationError("Request body must contain issue.key")
    return key.strip()


class ReleasePipeline:
    """
    Orquestra uma execução: issue principal -> issues bloqueadoras -> Slack.

    Cada instância atende uma única execução; nada é compartilhado entre execuções.
    """

    def __init__(self, config: Config, client: Optional[JiraClient] = None):
        self.config = config
        self.client = client or JiraClient(config)
        self.stage = Stage.CONFIG_VALIDATED

    def _advance(self, stage: Stage) -> None:
        logger.debug(f"Pipeline: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def enrich(self, issue_key: str) -> EnrichedRelease:
        summary, issue = self.client.fetch_issue_summary(issue_key, expand_links=True)
        self._advance(Stage.PRIMARY_FETCHED)

        directory = FieldDirectory(
            self.client,
            self.config.cross_reference_field_tokens,
            cache=self.config.cache_field_metadata,
        )
        resolver = BlockingIssueResolver(
            self.client,
            directory,
            self.config.cross_reference_url_template,
            max_workers=self.config.max_workers,
        )
        blocking = resolver.resolve_all(issue.blocking_links)
        self._advance(Stage.BLOCKING_RESOLVED)
        logger.info(f"Issue {summary.key}: {len(blocking)} issue(s) bloqueadora(s) resolvida(s)")
        return EnrichedRelease(issue=summary, blocking_issues=blocking)

    def run(self, payload: Any) -> dict:
        try:
            issue_key = validate_payload(payload)
            self._advance(Stage.PAYLOAD_VALIDATED)
            logger.debug(f"Received webhook payload: {json.dumps(payload, default=str)}")

            release = self.enrich(issue_key)

            message = build_release_message(release)
            self._advance(Stage.COMPOSED)

            result = send_slack_payload(self.config.slack_webhook_url, message, timeout=self.config.request_timeout)
            self._advance(Stage.SENT)
            logger.info(f"Slack notification result: {result.message}")
        except Exception:
            self._advance(Stage.FAILED)
            raise

        self._advance(Stage.DONE)
        return {
            "success": True,
            "message": SUCCESS_MESSAGE,
            "issue": {
                "key": release.issue.key,
                "summary": release.issue.summary,
            },
            "blocking_issues": len(release.blocking_issues),
            "timestamp": utc_timestamp(),
        }


def process_release(payload: Any, environ: Optional[Mapping[str, str]] = None) -> dict:
    """Valida a configuração antes de qualquer I/O e executa o pipeline."""
    config = load_config(environ)
    return ReleasePipeline(config).run(payload)


def build_error_result(error: Exception) -> Tuple[dict, int]:
    """
    Mapeia o erro para (body, status_code). A mensagem é genérica, exceto em
    erros de validação do payload; credenciais e respostas do upstream nunca
    aparecem aqui.
    """
    if isinstance(error, ValidationError):
        return {"error": "Bad request", "message": str(error), "timestamp": utc_timestamp()}, 400
    if isinstance(error, ConfigError):
        body = {"error": "Configuration error", "message": "Service is not configured correctly"}
        status = 500
    elif isinstance(error, UpstreamError):
        body = {"error": "Upstream error", "message": f"Request to {error.service} failed"}
        status = 502
    else:
        body = {"error": "Internal server error", "message": "Unexpected error while processing the webhook"}
        status = 500
    body["timestamp"] = utc_timestamp()
    return body, status
