import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote

from .constants import FETCH_FAILED_SUMMARY
from .errors import ReleaseNotifierError
from .fields import FieldDirectory, scan_numeric_custom_fields
from .models import IssueLink, JiraIssue, ResolvedBlockingIssue

logger = logging.getLogger(__name__)


def build_cross_reference_url(template: str, identifier: Optional[str]) -> Optional[str]:
    if not identifier:
        return None
    # O ID vai dentro de <url|texto> no Slack
    return template.format(id=quote(identifier, safe=""))


def placeholder_for(link: IssueLink) -> ResolvedBlockingIssue:
    return ResolvedBlockingIssue(key=link.key, summary=FETCH_FAILED_SUMMARY)


class BlockingIssueResolver:
    def __init__(self, client, directory: FieldDirectory, url_template: str, max_workers: int = 1):
        self.client = client
        self.directory = directory
        self.url_template = url_template
        self.max_workers = max(1, max_workers)

    def extract_cross_reference_id(self, issue: JiraIssue) -> Tuple[Optional[str], str]:
        """
        Retorna (identificador, origem). Origem: 'metadata', 'heuristic' ou 'none'.

        A varredura heurística só roda se o campo encontrado via metadados não
        existir ou estiver vazio nesta issue.
        """
        match = self.directory.find_cross_reference_field()
        if match is not None:
            identifier = issue.field_value(match.id).as_identifier()
            if identifier:
                return identifier, 'metadata'
            logger.debug(f"Campo {match.id} vazio em {issue.key}, tentando heurística")

        found = scan_numeric_custom_fields(issue)
        if found:
            field_id, identifier = found
            logger.debug(f"Heurística usou {field_id}={identifier} em {issue.key}")
            return identifier, 'heuristic'
        return None, 'none'

    def resolve(self, link: IssueLink) -> ResolvedBlockingIssue:
        try:
            issue = self.client.fetch_issue(link.key, expand_links=False)
        except ReleaseNotifierError as exc:
            logger.warning(f"Falha ao buscar issue bloqueadora {link.key}: {exc}")
            return placeholder_for(link)

        identifier, source = self.extract_cross_reference_id(issue)
        url = build_cross_reference_url(self.url_template, identifier)
        if url is None:
            logger.info(f"Nenhum ID de referência para {issue.key}")
        return ResolvedBlockingIssue(
            key=issue.key or link.key,
            summary=issue.summary or link.summary or issue.key or link.key,
            url=url,
            cross_reference_id=identifier,
        )

    def _resolve_safely(self, link: IssueLink) -> ResolvedBlockingIssue:
        try:
            return self.resolve(link)
        except Exception as exc:
            # Uma issue bloqueadora nunca pode derrubar o pipeline inteiro
            logger.exception(f"Erro inesperado ao resolver {link.key}: {exc}")
            return placeholder_for(link)

    def resolve_all(self, links: Sequence[IssueLink]) -> List[ResolvedBlockingIssue]:
        """Resolve todos os links preservando a ordem de entrada."""
        if not links:
            return []
        workers = min(self.max_workers, len(links))
        if workers == 1:
            return [self._resolve_safely(link) for link in links]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="blocking-resolver") as pool:
            # map devolve na ordem dos argumentos, não na ordem de conclusão
            return list(pool.map(self._resolve_safely, links))
