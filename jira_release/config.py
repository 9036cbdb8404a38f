import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .constants import (
    ACCEPTED_BASE_URL_PREFIXES,
    DEFAULT_CROSS_REFERENCE_FIELD_TOKENS,
    DEFAULT_CROSS_REFERENCE_URL_TEMPLATE,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    REQUIRED_ENV_VARS,
    SLACK_WEBHOOK_PREFIX,
)
from .errors import ConfigError


@dataclass(frozen=True)
class Config:
    jira_base_url: str
    jira_email: str
    jira_api_token: str = field(repr=False)
    slack_webhook_url: str = field(repr=False)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    verify_tls: bool = True
    cross_reference_url_template: str = DEFAULT_CROSS_REFERENCE_URL_TEMPLATE
    cross_reference_field_tokens: Tuple[str, ...] = DEFAULT_CROSS_REFERENCE_FIELD_TOKENS
    max_workers: int = DEFAULT_MAX_WORKERS
    cache_field_metadata: bool = True


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes")


def _positive_number(env: Mapping[str, str], name: str, default, cast):
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'")
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero")
    return value


def _tokens(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw or not raw.strip():
        return DEFAULT_CROSS_REFERENCE_FIELD_TOKENS
    tokens = tuple(t.strip().lower() for t in raw.split(",") if t.strip())
    return tokens or DEFAULT_CROSS_REFERENCE_FIELD_TOKENS


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Lê e valida a configuração a partir do ambiente.

    Levanta ConfigError quando falta alguma variável obrigatória ou quando as
    URLs não têm o prefixo esperado. Não faz nenhuma chamada de rede.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    base_url = env["JIRA_BASE_URL"].strip()
    if not base_url.startswith(ACCEPTED_BASE_URL_PREFIXES):
        raise ConfigError("JIRA_BASE_URL must be a valid URL starting with http:// or https://")

    slack_url = env["SLACK_WEBHOOK_URL"].strip()
    if not slack_url.startswith(SLACK_WEBHOOK_PREFIX):
        raise ConfigError("SLACK_WEBHOOK_URL must be a valid Slack webhook URL")

    template = (env.get("CROSS_REFERENCE_URL_TEMPLATE") or "").strip() or DEFAULT_CROSS_REFERENCE_URL_TEMPLATE
    if "{id}" not in template:
        raise ConfigError("CROSS_REFERENCE_URL_TEMPLATE must contain an {id} placeholder")
    try:
        template.format(id="0")
    except (KeyError, IndexError, ValueError, AttributeError):
        raise ConfigError("CROSS_REFERENCE_URL_TEMPLATE must contain only the {id} placeholder")

    return Config(
        jira_base_url=base_url.rstrip("/"),
        jira_email=env["JIRA_EMAIL"].strip(),
        jira_api_token=env["JIRA_API_TOKEN"].strip(),
        slack_webhook_url=slack_url,
        request_timeout=_positive_number(env, "JIRA_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS, float),
        verify_tls=_flag(env.get("JIRA_VERIFY_TLS"), True),
        cross_reference_url_template=template,
        cross_reference_field_tokens=_tokens(env.get("CROSS_REFERENCE_FIELD_TOKENS")),
        max_workers=_positive_number(env, "BLOCKING_RESOLVE_MAX_WORKERS", DEFAULT_MAX_WORKERS, int),
        cache_field_metadata=_flag(env.get("FIELD_METADATA_CACHE"), True),
    )


def config_check(environ: Optional[Mapping[str, str]] = None) -> dict:
    """Presença das variáveis obrigatórias, sem expor os valores."""
    env = os.environ if environ is None else environ
    return {
        name.lower(): "✓ Set" if (env.get(name) or "").strip() else "✗ Missing"
        for name in REQUIRED_ENV_VARS
    }
