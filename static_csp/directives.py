"""
Build the Content-Security-Policy directive map for a batch of documents.

Tokens are merged in a fixed order: the baseline policy, inline hashes,
origins of external resources, preset origins and finally user supplied
directives. Within a directive a token is only ever added once, so the first
stage to mention it decides its position.
"""

from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from .config import CspConfig
from .models import CollectedSources
from .presets import apply_presets

KNOWN_DIRECTIVES = (
    'default-src',
    'script-src',
    'style-src',
    'img-src',
    'font-src',
    'connect-src',
    'frame-src',
    'frame-ancestors',
    'form-action',
    'base-uri',
)

BASELINE_DIRECTIVES = {
    'default-src': ["'self'"],
    'script-src': ["'self'"],
    'style-src': ["'self'"],
    'img-src': ["'self'", 'data:'],
    'font-src': ["'self'"],
    'connect-src': ["'self'"],
    'frame-ancestors': ["'none'"],
    'form-action': ["'self'"],
    'base-uri': ["'self'"],
}

DEFAULT_PORTS = {'http': 80, 'https': 443}


def extract_origin(url: str) -> str:
    """Reduce a URL to scheme://host[:port], or return it unchanged if it won't parse."""
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        return url
    if not parsed.scheme or not host:
        return url

    scheme = parsed.scheme.lower()
    if ':' in host:
        host = f'[{host}]'
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        return f'{scheme}://{host}:{port}'
    return f'{scheme}://{host}'


def _append_unique(directives: Dict[str, List[str]], name: str, tokens: Iterable[str]) -> None:
    sources = directives.setdefault(name, [])
    for token in tokens:
        if token not in sources:
            sources.append(token)


def build_directives(collected: CollectedSources, config: Optional[CspConfig] = None) -> Dict[str, List[str]]:
    directives = {name: list(tokens) for name, tokens in BASELINE_DIRECTIVES.items()}

    _append_unique(directives, 'script-src', (f"'{h}'" for h in collected.script_hashes))
    _append_unique(directives, 'style-src', (f"'{h}'" for h in collected.style_hashes))

    _append_unique(directives, 'script-src', (extract_origin(url) for url in collected.external_scripts))
    _append_unique(directives, 'style-src', (extract_origin(url) for url in collected.external_styles))

    if config is None:
        return directives

    if config.presets:
        resources = apply_presets(config.presets)
        _append_unique(directives, 'script-src', resources.scripts)
        _append_unique(directives, 'style-src', resources.styles)
        _append_unique(directives, 'font-src', resources.fonts)
        _append_unique(directives, 'connect-src', resources.connect)

    # Unknown directive names are passed through as extra entries
    for name, tokens in config.directives.items():
        _append_unique(directives, name, tokens)

    return directives


def format_policy(directives: Dict[str, List[str]]) -> str:
    """Serialize a directive map into a Content-Security-Policy header value."""
    parts = []
    for name, tokens in directives.items():
        if tokens:
            parts.append(f"{name} {' '.join(tokens)}")
        else:
            parts.append(name)
    return '; '.join(parts)
