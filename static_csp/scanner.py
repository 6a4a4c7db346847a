from typing import Optional

from .markup import LINK_TAG_RE, SCRIPT_ELEMENT_RE, STYLE_ELEMENT_RE, parse_attributes
from .models import InlineElement, ScanResult


def is_https_url(url: Optional[str]) -> bool:
    """Only https:// URLs can be expressed as a single origin token."""
    return bool(url) and url[:8].lower() == 'https://'


def _find_scripts(html: str, result: ScanResult) -> None:
    for match in SCRIPT_ELEMENT_RE.finditer(html):
        attributes = parse_attributes(match.group('attrs'))
        if 'src' in attributes:
            # The fallback body of a src script is never hashed
            src = (attributes['src'] or '').strip()
            if is_https_url(src):
                result.external_scripts.append(src)
            continue
        result.scripts.append(InlineElement(
            content=match.group('body'),
            start_index=match.start('body'),
            end_index=match.end('body'),
        ))


def _find_styles(html: str, result: ScanResult) -> None:
    for match in STYLE_ELEMENT_RE.finditer(html):
        result.styles.append(InlineElement(
            content=match.group('body'),
            start_index=match.start('body'),
            end_index=match.end('body'),
        ))


def _find_stylesheets(html: str, result: ScanResult) -> None:
    for match in LINK_TAG_RE.finditer(html):
        attributes = parse_attributes(match.group('attrs'))
        rel = (attributes.get('rel') or '').strip().lower()
        if rel != 'stylesheet':
            continue
        href = (attributes.get('href') or '').strip()
        if is_https_url(href):
            result.external_styles.append(href)


def extract_inline_elements(html: str) -> ScanResult:
    """
    Find inline scripts/styles and external https script/stylesheet URLs.

    Each list is in document order. Markup the patterns don't recognize is
    skipped rather than reported.
    """
    result = ScanResult()
    _find_scripts(html, result)
    _find_styles(html, result)
    _find_stylesheets(html, result)
    return result


scan = extract_inline_elements
