"""
Stamp integrity="sha256-..." attributes onto inline <script> and <style> elements.
"""

import re
from typing import Callable, Dict, Iterable, Tuple

from .hasher import hash_inline_elements
from .markup import SCRIPT_ELEMENT_RE, STYLE_ELEMENT_RE, parse_attributes
from .models import DigestRecord, ElementKind, ProcessedDocument
from .scanner import extract_inline_elements


def _stamper(kind: ElementKind, lookup: Dict[Tuple[ElementKind, str], str]) -> Callable[[re.Match], str]:
    def stamp(match: re.Match) -> str:
        element = match.group(0)
        attributes = parse_attributes(match.group('attrs'))
        if kind is ElementKind.SCRIPT and 'src' in attributes:
            return element
        if 'integrity' in attributes:
            return element
        digest = lookup.get((kind, match.group('body')))
        if digest is None:
            return element
        # Insert right before the '>' that closes the opening tag
        tag_end = match.end('attrs') - match.start()
        return f'{element[:tag_end]} integrity="{digest}"{element[tag_end:]}'
    return stamp


def inject_integrity(html: str, records: Iterable[DigestRecord]) -> str:
    """
    Add an integrity attribute to every inline element whose body matches a record.

    Matching is on (kind, exact body text), so identical bodies all get stamped.
    Scripts with a src attribute and elements that already carry an integrity
    attribute are left alone. With no records the input is returned as is.
    """
    lookup: Dict[Tuple[ElementKind, str], str] = {}
    for record in records:
        lookup.setdefault((ElementKind(record.kind), record.content), record.hash)
    if not lookup:
        return html

    result = SCRIPT_ELEMENT_RE.sub(_stamper(ElementKind.SCRIPT, lookup), html)
    result = STYLE_ELEMENT_RE.sub(_stamper(ElementKind.STYLE, lookup), result)
    return result


def process_html(html: str) -> ProcessedDocument:
    """Scan, hash and stamp one document."""
    scan_result = extract_inline_elements(html)

    script_records = hash_inline_elements(scan_result.scripts, ElementKind.SCRIPT)
    style_records = hash_inline_elements(scan_result.styles, ElementKind.STYLE)

    return ProcessedDocument(
        html=inject_integrity(html, script_records + style_records),
        script_records=script_records,
        style_records=style_records,
        external_scripts=scan_result.external_scripts,
        external_styles=scan_result.external_styles,
    )
