import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .constants import CUSTOM_FIELD_PREFIX

_DIGITS_RE = re.compile(r"^[0-9]+$")


class FieldKind(str, Enum):
    NUMBER = "number"
    NUMERIC_STRING = "numeric_string"
    TEXT = "text"
    EMPTY = "empty"
    OTHER = "other"


@dataclass(frozen=True)
class FieldValue:
    """Valor de um campo do Jira classificado por tipo (ver classify_field_value)."""

    kind: FieldKind
    raw: Any = None

    @property
    def is_numeric(self) -> bool:
        return self.kind in (FieldKind.NUMBER, FieldKind.NUMERIC_STRING)

    def as_identifier(self) -> Optional[str]:
        if self.kind == FieldKind.NUMBER:
            # Campos numéricos do Jira chegam como float (4567.0)
            if isinstance(self.raw, float) and self.raw.is_integer():
                return str(int(self.raw))
            return str(self.raw)
        if self.kind in (FieldKind.NUMERIC_STRING, FieldKind.TEXT):
            return self.raw.strip()
        return None


def classify_field_value(raw: Any) -> FieldValue:
    if raw is None:
        return FieldValue(FieldKind.EMPTY)
    # bool é subclasse de int em Python
    if isinstance(raw, bool):
        return FieldValue(FieldKind.OTHER, raw)
    if isinstance(raw, (int, float)):
        return FieldValue(FieldKind.NUMBER, raw)
    if isinstance(raw, str):
        if not raw.strip():
            return FieldValue(FieldKind.EMPTY, raw)
        if _DIGITS_RE.match(raw):
            return FieldValue(FieldKind.NUMERIC_STRING, raw)
        return FieldValue(FieldKind.TEXT, raw)
    return FieldValue(FieldKind.OTHER, raw)


@dataclass(frozen=True)
class IssueLink:
    key: str
    link_type: str
    summary: Optional[str] = None


@dataclass(frozen=True)
class IssueSummary:
    key: str
    summary: str
    url: str

    def __post_init__(self):
        if not self.key:
            raise ValueError("IssueSummary.key não pode ser vazio")


@dataclass(frozen=True)
class FieldDefinition:
    id: str
    name: str


@dataclass(frozen=True)
class JiraIssue:
    key: str
    summary: str
    status: Optional[str] = None
    assignee: Optional[str] = None
    priority: Optional[str] = None
    issue_type: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    blocking_links: Tuple[IssueLink, ...] = ()
    fields: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def field_value(self, field_id: str) -> FieldValue:
        return classify_field_value(self.fields.get(field_id))

    def custom_fields(self) -> Iterator[Tuple[str, FieldValue]]:
        """Campos customizados na ordem em que o Jira os enumerou."""
        for field_id, raw in self.fields.items():
            if field_id.startswith(CUSTOM_FIELD_PREFIX):
                yield field_id, classify_field_value(raw)


@dataclass(frozen=True)
class ResolvedBlockingIssue:
    key: str
    summary: str
    url: Optional[str] = None
    cross_reference_id: Optional[str] = None


@dataclass(frozen=True)
class EnrichedRelease:
    issue: IssueSummary
    blocking_issues: List[ResolvedBlockingIssue] = field(default_factory=list)


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message: str
