import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .errors import ReleaseNotifierError
from .models import FieldDefinition, JiraIssue

logger = logging.getLogger(__name__)

_UNSET = object()


def name_matches(name: Optional[str], tokens: Iterable[str]) -> bool:
    if not name:
        return False
    lowered = name.lower()
    return all(token.lower() in lowered for token in tokens)


def find_matching_field(definitions: Iterable[FieldDefinition], tokens: Iterable[str]) -> Optional[FieldDefinition]:
    tokens = tuple(tokens)
    for definition in definitions:
        if name_matches(definition.name, tokens):
            return definition
    return None


def scan_numeric_custom_fields(issue: JiraIssue) -> Optional[Tuple[str, str]]:
    """
    Heurística de fallback: primeiro campo customizado cujo valor é um número
    ou uma string só com dígitos. Retorna (field_id, identificador) ou None.
    """
    for field_id, value in issue.custom_fields():
        if value.is_numeric:
            return field_id, value.as_identifier()
    return None


class FieldDirectory:
    """
    Localiza o campo customizado que guarda o ID externo (ex.: "Drupal Issue ID").

    Nunca levanta exceção para quem chama: falha ao buscar os metadados vira None.
    Com `cache=True` os metadados são buscados no máximo uma vez por instância
    (uma instância por execução do pipeline), mesmo com resolução concorrente.
    """

    def __init__(self, client, tokens: Iterable[str], cache: bool = True):
        self.client = client
        self.tokens = tuple(tokens)
        self.cache = cache
        self._lock = threading.Lock()
        self._match = _UNSET

    def _lookup(self) -> Optional[FieldDefinition]:
        try:
            definitions: List[FieldDefinition] = self.client.fetch_fields()
        except ReleaseNotifierError as exc:
            logger.warning(f"Falha ao buscar metadados de campos do Jira: {exc}")
            return None
        match = find_matching_field(definitions, self.tokens)
        if match:
            logger.debug(f"Campo de referência encontrado: {match.id} ('{match.name}')")
        else:
            logger.debug(f"Nenhum campo contém os termos {list(self.tokens)}")
        return match

    def find_cross_reference_field(self) -> Optional[FieldDefinition]:
        if not self.cache:
            return self._lookup()
        with self._lock:
            if self._match is _UNSET:
                self._match = self._lookup()
            return self._match
