from typing import Optional


class ReleaseNotifierError(Exception):
    """Erro base do pipeline de notificação de release."""


class ConfigError(ReleaseNotifierError):
    """Credenciais ausentes ou malformadas. Nenhuma chamada de rede é feita."""


class ValidationError(ReleaseNotifierError):
    """Payload do webhook com formato inválido."""


class UpstreamError(ReleaseNotifierError):
    """
    Resposta não-2xx (ou timeout/erro de conexão) de uma chamada obrigatória.

    `status` é None quando não houve resposta HTTP (timeout, conexão recusada).
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = "", service: str = "jira"):
        super().__init__(message)
        self.status = status
        self.body = body
        self.service = service
