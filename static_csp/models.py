"""
Data types shared by the scanner, hasher, injector and directive builder.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List


class ElementKind(str, Enum):
    """Kind of inline element a digest was computed for"""
    SCRIPT = 'script'
    STYLE = 'style'


@dataclass(frozen=True)
class InlineElement:
    """Body of one inline <script> or <style>, with its offsets in the document."""
    content: str
    start_index: int
    end_index: int


@dataclass(frozen=True)
class DigestRecord:
    hash: str
    content: str
    kind: ElementKind


@dataclass
class ScanResult:
    scripts: List[InlineElement] = field(default_factory=list)
    styles: List[InlineElement] = field(default_factory=list)
    external_scripts: List[str] = field(default_factory=list)
    external_styles: List[str] = field(default_factory=list)


@dataclass
class ProcessedDocument:
    """One rewritten document plus what it contributes to the policy."""
    html: str
    script_records: List[DigestRecord] = field(default_factory=list)
    style_records: List[DigestRecord] = field(default_factory=list)
    external_scripts: List[str] = field(default_factory=list)
    external_styles: List[str] = field(default_factory=list)

    @property
    def script_hashes(self) -> List[str]:
        return [record.hash for record in self.script_records]

    @property
    def style_hashes(self) -> List[str]:
        return [record.hash for record in self.style_records]


class CollectedSources:
    """
    Hashes and external URLs aggregated across a batch of documents.

    Every collection is an insertion-ordered set (dict keys), so the first
    document to mention a hash or URL fixes its position and later duplicates
    are dropped.
    """

    def __init__(self):
        self._records: Dict[DigestRecord, None] = {}
        self._external_scripts: Dict[str, None] = {}
        self._external_styles: Dict[str, None] = {}

    def add(self, document: ProcessedDocument) -> None:
        for record in document.script_records + document.style_records:
            self._records.setdefault(record, None)
        self.add_external_scripts(document.external_scripts)
        self.add_external_styles(document.external_styles)

    def add_external_scripts(self, urls: Iterable[str]) -> None:
        for url in urls:
            self._external_scripts.setdefault(url, None)

    def add_external_styles(self, urls: Iterable[str]) -> None:
        for url in urls:
            self._external_styles.setdefault(url, None)

    def _hashes(self, kind: ElementKind) -> List[str]:
        hashes: Dict[str, None] = {}
        for record in self._records:
            if record.kind == kind:
                hashes.setdefault(record.hash, None)
        return list(hashes)

    @property
    def script_hashes(self) -> List[str]:
        return self._hashes(ElementKind.SCRIPT)

    @property
    def style_hashes(self) -> List[str]:
        return self._hashes(ElementKind.STYLE)

    @property
    def external_scripts(self) -> List[str]:
        return list(self._external_scripts)

    @property
    def external_styles(self) -> List[str]:
        return list(self._external_styles)
