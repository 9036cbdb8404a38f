import logging

import requests

from .constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from .errors import UpstreamError
from .models import NotificationResult

logger = logging.getLogger(__name__)


def send_slack_payload(webhook_url, payload, timeout=DEFAULT_REQUEST_TIMEOUT_SECONDS):
    try:
        resp = requests.post(webhook_url, json=payload, timeout=timeout)
    except requests.RequestException as exc:
        raise UpstreamError(f"Slack webhook request failed: {exc.__class__.__name__}", service="slack") from exc

    logger.debug(f"Slack response: {resp.status_code}")
    if not resp.ok:
        logger.debug(f"Response content: {resp.text}")
        raise UpstreamError(
            f"Slack webhook error: {resp.status_code} {resp.reason or ''}".strip(),
            status=resp.status_code,
            body=resp.text,
            service="slack",
        )
    return NotificationResult(success=True, message="Slack notification sent successfully")
