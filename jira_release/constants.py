import os

# Configurações globais de ambiente
APP_PORT = int(os.getenv("APP_PORT", "3000"))
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

SERVICE_NAME = "Jira Release Webhook"
SERVICE_VERSION = "1.0.0"

# Variáveis obrigatórias (ordem usada na mensagem de erro e no /health)
REQUIRED_ENV_VARS = ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN", "SLACK_WEBHOOK_URL")

ACCEPTED_BASE_URL_PREFIXES = ("http://", "https://")
SLACK_WEBHOOK_PREFIX = "https://hooks.slack.com/"

# Defaults dos parâmetros opcionais (sobrescritos por env em config.load_config)
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15
DEFAULT_MAX_WORKERS = 4
DEFAULT_CROSS_REFERENCE_URL_TEMPLATE = "https://www.drupal.org/i/{id}"
DEFAULT_CROSS_REFERENCE_FIELD_TOKENS = ("drupal", "issue", "id")

# Jira
JIRA_API_PREFIX = "/rest/api/3"
BLOCKING_LINK_TYPE = "Blocks"
CUSTOM_FIELD_PREFIX = "customfield_"

# Mensagens
FETCH_FAILED_SUMMARY = "Could not fetch issue details"
RELEASE_HEADER = "🚀 *New Release: {key}*"
RELEASE_ITEMS_TITLE = "*Issues included in this release:*"
VIEW_IN_JIRA_TEXT = "View in Jira"
VIEW_IN_JIRA_ACTION_ID = "view_jira_issue"
SUCCESS_MESSAGE = "Release notification sent successfully"
